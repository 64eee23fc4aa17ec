import asyncio
import logging
import sys

from startstop.config import settings
from startstop.logger import setup_logging
from startstop.mock_service.service import build_services
from startstop.service_manager.service_manager import ServiceManager
from startstop.signals import TerminationSignal
from startstop.utils import print_banner

logger = logging.getLogger("startstop")


async def main(config=settings) -> int:
    """
    Main entry point.
    Starts all configured services, waits for SIGINT/SIGTERM, stops them in
    reverse order and returns the process exit code.
    """
    services = build_services(config.SERVICES)
    if config.SHOW_BANNER:
        print_banner("StartStop", services=[s.name for s in services])
    logger.info("Starting StartStop...")

    service_manager = ServiceManager(
        start_timeout=config.START_TIMEOUT,
        stop_timeout=config.STOP_TIMEOUT,
        cancel_on_timeout=config.CANCEL_ON_TIMEOUT,
    )
    for service in services:
        service_manager.register(service)

    termination = TerminationSignal()
    termination.install()
    try:
        result = await service_manager.run(termination)
    finally:
        termination.uninstall()

    if result.ok:
        logger.info("All services stopped cleanly.")
    else:
        logger.error(f"Lifecycle finished with {len(result.failures)} failure(s); exit status {result.exit_code}")
    return result.exit_code


def run():
    setup_logging()
    sys.exit(asyncio.run(main()))
