"""Error types for the agenda client."""


class GatewayError(RuntimeError):
    """Raised when an agenda service request fails.

    Carries the server-provided message verbatim so it can be shown to the
    operator. status_code is None for transport failures (no response).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AgendaNotLoadedError(RuntimeError):
    """Raised when agenda days are read before the collection has loaded."""
