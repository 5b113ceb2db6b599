"""Exception hierarchy for the completion engine.

Every failure is fatal to the caller: nothing in the engine retries or
repairs a prompt. The CLI is the only place these are turned into an
exit status.
"""


class GptAutoTestError(Exception):
    """Base class for all engine errors."""
    pass


class ConfigError(GptAutoTestError):
    """Raised for missing credentials or an unusable configuration."""
    pass


class TransportError(GptAutoTestError):
    """Raised when the HTTP exchange itself fails.

    Attributes:
        url: Endpoint that was called
        status_code: HTTP status, or None if no response was received
        body: Response body kept for diagnostics (may be empty)
    """

    def __init__(self, message: str, url: str = "", status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body


class CompletionError(GptAutoTestError):
    """Raised when a completion round yields no usable reply."""
    pass


class ExtractionError(GptAutoTestError):
    """Raised when no fenced code block can be isolated from a reply."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class NoOpenFenceError(ExtractionError):
    """The reply has no opening fence for the expected language."""
    pass


class NoCloseFenceError(ExtractionError):
    """An opening fence was found but nothing closes it."""
    pass


class FragmentSyntaxError(GptAutoTestError):
    """Raised when extracted code does not parse as the expected shape."""

    def __init__(self, message: str, code: str = "", lineno: int | None = None, msg: str = ""):
        super().__init__(message)
        self.code = code
        self.lineno = lineno
        self.msg = msg
