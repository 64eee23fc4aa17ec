"""
Deadline-bounded invocation of a single service operation.

The operation runs as its own asyncio task (blocking callables are pushed to
a worker thread) and is raced against the deadline. When the deadline wins
the call returns immediately with DeadlineExceeded; the operation itself is
left running in the background and its late outcome is only logged. With
cancel_on_timeout the task is also cancelled, which a coroutine can honour
cooperatively. A blocking callable in a thread cannot be interrupted and
always runs to completion.
"""
import asyncio
import inspect
import logging
from typing import Set

from .errors import DeadlineExceeded, OperationFailed, Phase

logger = logging.getLogger("startstop.invoker")

# Tasks that missed their deadline and have not finished yet. Holding a
# reference keeps them from being garbage collected mid-flight.
_abandoned: Set[asyncio.Task] = set()


def abandoned_operations() -> Set[asyncio.Task]:
    """Snapshot of operations still running after their deadline elapsed."""
    return set(_abandoned)


async def _run_blocking(operation, timeout: float):
    # Decorated or partial coroutine functions look synchronous; await what they return
    outcome = await asyncio.to_thread(operation, timeout)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome


def _launch(service, phase: Phase, timeout: float) -> asyncio.Task:
    operation = getattr(service, phase.value)
    if inspect.iscoroutinefunction(operation):
        coro = operation(timeout)
    else:
        coro = _run_blocking(operation, timeout)
    return asyncio.create_task(coro, name=f"{service.name}.{phase.value}")


def _abandon(task: asyncio.Task, service_name: str, phase: Phase):
    _abandoned.add(task)

    def _on_done(finished: asyncio.Task):
        _abandoned.discard(finished)
        if finished.cancelled():
            logger.debug(f"Abandoned {phase.value} of {service_name} was cancelled")
            return
        exc = finished.exception()
        if exc is not None:
            logger.warning(f"Abandoned {phase.value} of {service_name} failed after its deadline: {exc!r}")
        else:
            logger.warning(f"Abandoned {phase.value} of {service_name} completed after its deadline")

    task.add_done_callback(_on_done)


async def call_with_deadline(service, phase: Phase, timeout: float, *, cancel_on_timeout: bool = False):
    """
    Run service.start or service.stop bounded by a fresh deadline.

    Args:
        service: Object implementing the Service protocol
        phase: Phase.START or Phase.STOP
        timeout: Deadline in seconds, measured from this call
        cancel_on_timeout: Cancel the operation when the deadline elapses
            instead of only abandoning it

    Raises:
        DeadlineExceeded: The deadline elapsed before the operation finished
        OperationFailed: The operation raised before the deadline
    """
    if timeout <= 0:
        raise ValueError(f"timeout must be > 0, got {timeout}")
    phase = Phase(phase)

    task = _launch(service, phase, timeout)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        raise

    if not done:
        _abandon(task, service.name, phase)
        if cancel_on_timeout:
            task.cancel()
        raise DeadlineExceeded(service.name, phase, timeout)

    if task.cancelled():
        raise OperationFailed(service.name, phase, asyncio.CancelledError())
    exc = task.exception()
    if exc is not None:
        raise OperationFailed(service.name, phase, exc) from exc
