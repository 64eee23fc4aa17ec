import asyncio
import logging
import signal
from typing import Dict, Iterable, Optional

logger = logging.getLogger("startstop.signals")

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TerminationSignal:
    """
    One-shot notification that the running phase should end.

    OS signals (SIGINT, SIGTERM by default) are routed to trigger() once
    install() has been called from inside the event loop. Only the first
    trigger counts; later ones are ignored.
    """

    def __init__(self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS):
        self._signals = tuple(signals)
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous: Dict[signal.Signals, object] = {}

    @property
    def received(self) -> Optional[str]:
        return self._reason

    def is_set(self) -> bool:
        return self._event.is_set()

    def install(self):
        self._loop = asyncio.get_running_loop()
        for sig in self._signals:
            try:
                self._loop.add_signal_handler(sig, self.trigger, sig.name)
            except NotImplementedError:
                # No loop signal support (Windows): route through signal.signal
                self._previous[sig] = signal.signal(sig, self._handle_threadsafe)
        logger.debug(f"Termination handlers installed for {[s.name for s in self._signals]}")

    def uninstall(self):
        if self._loop is None:
            return
        for sig in self._signals:
            if sig in self._previous:
                signal.signal(sig, self._previous.pop(sig))
            else:
                self._loop.remove_signal_handler(sig)
        self._loop = None

    def _handle_threadsafe(self, signum, frame):
        self._loop.call_soon_threadsafe(self.trigger, signal.Signals(signum).name)

    def trigger(self, reason: str = "requested"):
        if self._event.is_set():
            logger.debug(f"Ignoring repeated termination request ({reason})")
            return
        self._reason = reason
        logger.info(f"Received termination signal: {reason}")
        self._event.set()

    async def wait(self) -> str:
        await self._event.wait()
        return self._reason
