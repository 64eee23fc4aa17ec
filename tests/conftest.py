import asyncio

import pytest
import pytest_asyncio

from startstop.service_manager.base_service import BaseService
from startstop.service_manager.invoker import abandoned_operations


class RecordingService(BaseService):
    """Service double that appends every call it receives to a shared journal."""

    def __init__(self, name, journal, start_delay=0.0, stop_delay=0.0, fail_start=False, fail_stop=False):
        super().__init__(name)
        self.journal = journal
        self.start_delay = start_delay
        self.stop_delay = stop_delay
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.started = False

    async def start(self, timeout):
        self.journal.append(("start", self.name))
        await asyncio.sleep(self.start_delay)
        if self.fail_start:
            raise RuntimeError(f"{self.name} start boom")
        self.started = True

    async def stop(self, timeout):
        self.journal.append(("stop", self.name))
        if not self.started:
            return
        await asyncio.sleep(self.stop_delay)
        if self.fail_stop:
            raise RuntimeError(f"{self.name} stop boom")
        self.started = False


class FakeTermination:
    def __init__(self, reason="test"):
        self.reason = reason
        self.waited = False

    async def wait(self):
        self.waited = True
        return self.reason


@pytest.fixture
def journal():
    return []


@pytest.fixture
def make_service(journal):
    def _make(name, **kwargs):
        return RecordingService(name, journal, **kwargs)
    return _make


@pytest.fixture
def termination():
    return FakeTermination()


@pytest_asyncio.fixture
async def drain_abandoned():
    # Let operations left behind by a timed-out call finish before the loop closes
    yield
    pending = abandoned_operations()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
