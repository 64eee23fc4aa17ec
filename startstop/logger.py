import logging
import sys

from pythonjsonlogger import jsonlogger

from .config import settings

# ANSI escape codes
_RESET    = "\033[0m"
_BOLD     = "\033[1m"
_DIM      = "\033[2m"

# Level → color
_LEVEL_COLORS = {
    "DEBUG":    "\033[36m",    # Cyan
    "INFO":     "\033[32m",    # Green
    "WARNING":  "\033[33m",    # Yellow
    "ERROR":    "\033[31m",    # Red
    "CRITICAL": "\033[35;1m",  # Bright Magenta
}

_COMPONENT_COLOR = "\033[94m"
_COMPONENT_TAG   = "STARTSTOP"
_SERVICE_COLOR   = "\033[95m"


class StartStopFormatter(logging.Formatter):
    """
    Human-readable colored formatter.

    Each line carries the time since process start, which is what deadlines
    are read against. Records logged with extra={"service": ..., "phase": ...}
    get a service column naming the call in flight.

    Example output:
      [+0000.002s]  [STARTSTOP]  [INFO    ]  startstop.service-manager  » Starting all services...
      [+0001.004s]  [STARTSTOP]  [INFO    ]  startstop.service-manager  <A:start>  » Started A
      [+0006.010s]  [STARTSTOP]  [ERROR   ]  startstop.service-manager  <C:start>  » Can't start service: ...
    """

    def format(self, record: logging.LogRecord) -> str:
        elapsed = record.relativeCreated / 1000
        ts_part = f"{_DIM}[+{elapsed:08.3f}s]{_RESET}"

        badge = f"{_COMPONENT_COLOR}{_BOLD}[{_COMPONENT_TAG}]{_RESET}"

        level      = record.levelname
        lcolor     = _LEVEL_COLORS.get(level, "")
        level_part = f"{lcolor}{_BOLD}[{level:<8}]{_RESET}"

        name_part = f"{_DIM}{record.name}{_RESET}"

        service = getattr(record, "service", None)
        if service:
            phase = getattr(record, "phase", None)
            call = f"{service}:{phase}" if phase else service
            name_part += f"  {_SERVICE_COLOR}<{call}>{_RESET}"

        msg = record.getMessage()
        if record.exc_info:
            msg = msg + "\n" + self.formatException(record.exc_info)

        return f"{ts_part}  {badge}  {level_part}  {name_part}  » {msg}"


def setup_logging(environment: str = None, level: str = None) -> logging.Logger:
    """
    Configure logging for the orchestrator.

    Production   → JSON lines to stdout for log aggregators
    Otherwise    → colored, human-readable lines to stdout

    Defaults come from settings.ENVIRONMENT and settings.LOG_LEVEL.
    """
    environment = environment or settings.ENVIRONMENT
    level = level or settings.LOG_LEVEL

    root = logging.getLogger()

    # Remove handlers added by imported libraries before us
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)

    if environment == "production":
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            json_ensure_ascii=False
        )
        handler.setFormatter(formatter)
    else:
        handler.setFormatter(StartStopFormatter())

    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return root
