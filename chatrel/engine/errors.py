"""
Failure taxonomy for the analysis core.

Callers need to tell three situations apart: input that should never have
been submitted, an inference service that could not be reached (worth
retrying), and a service that answered with something we cannot use
(retrying the same request is unlikely to help).
"""


class ChatRelError(Exception):
    """Base class for all typed failures raised by the engine."""

    error_code = "chatrel_error"
    retryable = False


class InputRejectedError(ChatRelError):
    """The transcript or chat message is empty or whitespace only."""

    error_code = "input_rejected"


class ServiceUnavailableError(ChatRelError):
    """The inference call failed or returned no usable text."""

    error_code = "service_unreachable"
    retryable = True


class MalformedResponseError(ChatRelError):
    """The service returned text that is not valid JSON of the expected shape."""

    error_code = "malformed_response"

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class TaskBusyError(ChatRelError):
    """A call of the same task kind is already in flight for this session."""

    error_code = "task_pending"
