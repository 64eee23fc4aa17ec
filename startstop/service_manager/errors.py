from enum import Enum


class Phase(str, Enum):
    START = "start"
    STOP = "stop"


class LifecycleError(RuntimeError):
    # Base error for a failed start/stop call of one managed service.
    def __init__(self, service_name: str, phase: Phase, message: str):
        super().__init__(message)
        self.service_name = service_name
        self.phase = Phase(phase)


class DeadlineExceeded(LifecycleError):
    # The bounded call did not complete before its deadline.
    def __init__(self, service_name: str, phase: Phase, timeout: float):
        super().__init__(
            service_name,
            phase,
            f"time limit of {timeout:g}s exceeded while {_gerund(phase)} service {service_name}",
        )
        self.timeout = timeout


class OperationFailed(LifecycleError):
    # The service itself reported failure before its deadline.
    def __init__(self, service_name: str, phase: Phase, cause: BaseException):
        super().__init__(
            service_name,
            phase,
            f"service {service_name} failed to {Phase(phase).value}: {cause!r}",
        )
        self.cause = cause


class LifecycleStateError(RuntimeError):
    # Raised when the service manager is driven out of order (e.g. started twice).
    pass


def _gerund(phase: Phase) -> str:
    return "starting" if Phase(phase) is Phase.START else "stopping"
