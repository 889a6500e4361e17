from abc import ABC, abstractmethod

from gregeoip.logger import logger


class BaseDiagnosticsSink(ABC):
    """Destination for diagnostic records about failed API calls.

    The client hands every transport failure and unexpected status to a sink
    instead of writing to the console, so applications and tests can route or
    inspect those records. Messages passed in are already free of the API key.
    """

    @abstractmethod
    def record(self, message: str, cause: BaseException | None = None) -> None:
        """Record one diagnostic message, optionally with the underlying exception."""
        raise NotImplementedError


class LoggerDiagnosticsSink(BaseDiagnosticsSink):
    """Default sink that writes records to the `gregeoip` logger at ERROR level."""

    def record(self, message: str, cause: BaseException | None = None) -> None:
        if cause is None:
            logger.error(message)
        else:
            logger.error(f"{message} cause={type(cause).__name__}")
