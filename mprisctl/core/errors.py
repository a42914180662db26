"""Domain-specific errors for mprisctl."""


class MprisctlError(Exception):
    """Base error for mprisctl."""


class CommandValidationError(MprisctlError):
    """Raised when a command file does not conform to schema or semantics."""


class CommandLoadError(MprisctlError):
    """Raised when loading command sources fails."""


class MatchSelectionError(MprisctlError):
    """Raised when a query cannot be resolved to a single match."""


class TransportError(MprisctlError):
    """Base transport error."""


class TransportUnavailableError(TransportError):
    """Raised when the bus cannot be reached."""


class MalformedReplyError(TransportError):
    """Raised when a bus reply does not have the expected shape."""


class MethodCallError(TransportError):
    """Raised when a remote method call returns an error reply."""


class PropertyReadError(TransportError):
    """Raised when a remote property cannot be read."""
