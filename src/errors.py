"""Error taxonomy for source extraction and upstream collaborators."""


class RagError(Exception):
    """Base class for application errors."""


class DocumentNotFoundError(RagError, LookupError):
    """An external page or document does not exist."""

    def __init__(self, message: str, item: str = "") -> None:
        super().__init__(message)
        self.item = item


class MalformedUpstreamError(RagError, ValueError):
    """A collaborator returned a response missing required fields.

    ``source`` names the collaborator ("wikipedia", "openai", "chroma", ...)
    and ``item`` the ID or title the request was about, so it can be retried.
    """

    def __init__(self, message: str, source: str = "", item: str = "") -> None:
        super().__init__(message)
        self.source = source
        self.item = item
