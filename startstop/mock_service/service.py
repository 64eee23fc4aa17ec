import asyncio
import logging

from startstop.schemas.service import MockServiceSpec
from startstop.service_manager.base_service import BaseService

logger = logging.getLogger("startstop.mock-service")


class MockService(BaseService):
    """
    Fake service that simulates slow startup and shutdown.
    Responsibility: stand in for real services so the orchestrator can be
    exercised end to end.

    start() takes `duration` seconds; stop() takes `duration + stop_delay`
    seconds and does nothing if the service never started.
    """

    def __init__(
        self,
        name: str,
        duration: float,
        stop_delay: float = 1.0,
        fail_start: bool = False,
        fail_stop: bool = False,
    ):
        super().__init__(name)
        self.duration = duration
        self.stop_delay = stop_delay
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self._running = False

    @classmethod
    def from_spec(cls, spec: MockServiceSpec) -> "MockService":
        return cls(
            spec.name,
            spec.duration,
            stop_delay=spec.stop_delay,
            fail_start=spec.fail_start,
            fail_stop=spec.fail_stop,
        )

    @property
    def running(self) -> bool:
        return self._running

    async def start(self, timeout: float):
        logger.info(f"Starting service {self.name} (~{self.duration:g}s, deadline {timeout:g}s)...")
        await asyncio.sleep(self.duration)
        if self.fail_start:
            raise RuntimeError(f"{self.name} refused to start")
        self._running = True
        logger.info(f"{self.name} started.")

    async def stop(self, timeout: float):
        if not self._running:
            return
        logger.info(f"Stopping service {self.name} (~{self.duration + self.stop_delay:g}s, deadline {timeout:g}s)...")
        await asyncio.sleep(self.duration + self.stop_delay)
        if self.fail_stop:
            raise RuntimeError(f"{self.name} refused to stop")
        self._running = False
        logger.info(f"{self.name} stopped.")


def build_services(specs) -> list:
    return [MockService.from_spec(spec) for spec in specs]
