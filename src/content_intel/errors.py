"""Exception types raised inside the content intelligence engine."""


class ContentIntelError(Exception):
    """Base class for engine errors."""


class EmbeddingInitError(ContentIntelError):
    """The embedding backend could not be constructed.

    Raised internally during initialization; the service catches it and
    switches to fallback-vector mode for the rest of its lifetime.
    """


class RemoteServiceError(ContentIntelError):
    """A call to the optional remote classifier/summarizer failed."""

    def __init__(self, action: str, message: str):
        super().__init__(f"Remote {action} failed: {message}")
        self.action = action
