from abc import ABC, abstractmethod


class BaseService(ABC):
    """
    Base class for all managed services.
    Enforces the Service protocol expected by ServiceManager.

    start() and stop() receive the deadline (seconds) the manager enforces
    on the call. They signal failure by raising. stop() on a service that
    never started must return without error.
    """
    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    async def start(self, timeout: float):
        """Asynchronously start the service."""
        pass

    @abstractmethod
    async def stop(self, timeout: float):
        """Asynchronously stop the service."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"
