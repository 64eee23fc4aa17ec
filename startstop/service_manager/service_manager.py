import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Protocol

from .errors import LifecycleError, LifecycleStateError, Phase
from .invoker import call_with_deadline

logger = logging.getLogger("startstop.service-manager")


def _call(service, phase: Phase) -> dict:
    # Log record extras naming the call in flight
    return {"service": service.name, "phase": phase.value}


class Service(Protocol):
    async def start(self, timeout: float):
        ...

    async def stop(self, timeout: float):
        ...

    @property
    def name(self) -> str:
        ...


class TerminationWaiter(Protocol):
    async def wait(self) -> str:
        ...


class ManagerPhase(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    STARTED = "started"
    FAILED = "failed"
    STOPPING = "stopping"
    STOPPED = "stopped"


@dataclass
class LifecycleResult:
    """
    Outcome of one lifecycle run.

    Failures are only ever appended, so once a run is not ok it stays that way.
    """
    failures: List[LifecycleError] = field(default_factory=list)
    startup_failed: bool = False

    def record(self, error: LifecycleError):
        self.failures.append(error)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


class ServiceManager:
    """
    Manages the lifecycle of registered services.

    Services start one at a time in registration order and stop one at a
    time in reverse order. Every call is bounded by its own deadline. A
    start failure rolls back the services already running; a stop failure
    is logged and shutdown carries on.
    """
    def __init__(self, start_timeout: float, stop_timeout: float, cancel_on_timeout: bool = False):
        if start_timeout <= 0 or stop_timeout <= 0:
            raise ValueError("start_timeout and stop_timeout must be > 0")
        self.services: List[Service] = []
        self.start_timeout = start_timeout
        self.stop_timeout = stop_timeout
        self.cancel_on_timeout = cancel_on_timeout
        # Services whose start succeeded and that have not had a stop attempt yet,
        # in registration order
        self._running: List[Service] = []
        self._phase = ManagerPhase.IDLE

    @property
    def phase(self) -> ManagerPhase:
        return self._phase

    @property
    def running(self) -> List[Service]:
        return list(self._running)

    def register(self, service: Service):
        if self._phase is not ManagerPhase.IDLE:
            raise LifecycleStateError(f"Cannot register {service.name} once the manager is {self._phase.value}")
        self.services.append(service)
        logger.info(f"Registered service: {service.name}")

    async def start_all(self, result: LifecycleResult) -> bool:
        """
        Start every service in order, rolling back on the first failure.

        Returns True when all services started. On failure the error is
        recorded in result, the started services are stopped in reverse
        order and False is returned.
        """
        if self._phase is not ManagerPhase.IDLE:
            raise LifecycleStateError(f"Services already {self._phase.value}; a manager runs once")
        self._phase = ManagerPhase.STARTING
        logger.info("Starting all services...")

        for service in self.services:
            try:
                logger.info(f"Starting {service.name}...", extra=_call(service, Phase.START))
                await call_with_deadline(
                    service, Phase.START, self.start_timeout, cancel_on_timeout=self.cancel_on_timeout
                )
            except LifecycleError as e:
                logger.error(f"Can't start service: {e}", extra=_call(service, Phase.START))
                result.record(e)
                result.startup_failed = True
                self._phase = ManagerPhase.FAILED
                logger.warning(f"Rolling back {len(self._running)} started service(s)")
                await self.stop_all(result)
                return False
            self._running.append(service)
            logger.info(f"Started {service.name}", extra=_call(service, Phase.START))

        self._phase = ManagerPhase.STARTED
        return True

    async def stop_all(self, result: LifecycleResult) -> LifecycleResult:
        """Stop running services in reverse order, continuing past failures."""
        logger.info("Stopping all services...")
        self._phase = ManagerPhase.STOPPING

        # Stop in reverse order of start
        for service in reversed(list(self._running)):
            self._running.remove(service)
            try:
                logger.info(f"Stopping {service.name}...", extra=_call(service, Phase.STOP))
                await call_with_deadline(
                    service, Phase.STOP, self.stop_timeout, cancel_on_timeout=self.cancel_on_timeout
                )
                logger.info(f"Stopped {service.name}", extra=_call(service, Phase.STOP))
            except LifecycleError as e:
                logger.error(f"Can't stop service: {e}", extra=_call(service, Phase.STOP))
                result.record(e)

        self._phase = ManagerPhase.STOPPED
        return result

    async def run(self, termination: TerminationWaiter) -> LifecycleResult:
        """
        Full lifecycle: start, wait for termination, stop.

        When startup fails the rollback has already happened and the
        termination signal is never awaited.
        """
        result = LifecycleResult()
        if not await self.start_all(result):
            return result

        logger.info("All services started. Waiting for termination signal...")
        reason = await termination.wait()
        logger.info(f"Shutting down ({reason})...")
        await self.stop_all(result)
        return result
