"""
Redrive Error Types

Per-message errors never leave the processing loop; they are counted and
logged there. Only wiring and configuration errors reach the caller.
"""


class RedriveError(Exception):
    """Base class for redrive errors."""
    pass


class ConfigurationError(RedriveError):
    """Queue configuration could not be loaded or validated."""
    pass


class ProcessorNotInitializedError(RedriveError):
    """Raised when a queue processor is started before being wired."""
    pass


class HttpStatusError(RedriveError):
    """
    Redrive endpoint answered with a status other than 200 or 201.

    Attributes:
        status_code: HTTP status returned by the endpoint
        body: Response body text
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Received {status_code} status code with content [{body}]")


class MalformedMessageError(RedriveError):
    """Message content is not a flat JSON object (GET requests only)."""
    pass


class QueueDeletionError(RedriveError):
    """Message could not be removed from its queue."""
    pass


class ShutdownTimeoutError(RedriveError):
    """Processing loop did not exit within the stop grace period."""
    pass
