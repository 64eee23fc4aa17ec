import time

import pytest

from startstop.mock_service.service import MockService, build_services
from startstop.schemas.service import MockServiceSpec
from startstop.service_manager.errors import DeadlineExceeded, Phase
from startstop.service_manager.invoker import call_with_deadline


@pytest.mark.asyncio
async def test_stop_without_start_is_noop():
    service = MockService("A", duration=5)

    began = time.monotonic()
    await call_with_deadline(service, Phase.STOP, 0.1)

    assert time.monotonic() - began < 0.1
    assert service.running is False


@pytest.mark.asyncio
async def test_start_then_stop():
    service = MockService("A", duration=0.01, stop_delay=0.01)

    await service.start(1.0)
    assert service.running is True

    await service.stop(1.0)
    assert service.running is False


@pytest.mark.asyncio
async def test_stop_takes_longer_than_start(drain_abandoned):
    service = MockService("A", duration=0.05, stop_delay=0.2)
    await call_with_deadline(service, Phase.START, 0.15)

    with pytest.raises(DeadlineExceeded):
        await call_with_deadline(service, Phase.STOP, 0.15, cancel_on_timeout=True)


@pytest.mark.asyncio
async def test_fail_start_raises_and_stays_stopped():
    service = MockService("A", duration=0, fail_start=True)

    with pytest.raises(RuntimeError, match="refused to start"):
        await service.start(1.0)
    assert service.running is False


@pytest.mark.asyncio
async def test_fail_stop_raises():
    service = MockService("A", duration=0, stop_delay=0, fail_stop=True)
    await service.start(1.0)

    with pytest.raises(RuntimeError, match="refused to stop"):
        await service.stop(1.0)


def test_build_services_preserves_order():
    specs = [
        MockServiceSpec(name="A", duration=1),
        MockServiceSpec(name="B", duration=2, fail_stop=True),
        MockServiceSpec(name="C", duration=0.5, stop_delay=0),
    ]

    services = build_services(specs)

    assert [s.name for s in services] == ["A", "B", "C"]
    assert services[1].fail_stop is True
    assert services[2].duration == 0.5
    assert services[2].stop_delay == 0
    assert repr(services[0]) == "MockService('A')"
