"""
Common exceptions for the graph editor.

None of these are fatal to a running session: callers degrade to a no-op
or keep the previous graph.
"""


class GraphEditorError(Exception):
    """Base exception for all graph editor errors."""
    pass


class ConfigurationError(GraphEditorError):
    """Raised when there are configuration issues."""
    pass


class StorageError(GraphEditorError):
    """Raised when a storage backend cannot read or write a key."""
    pass


class GraphParseError(GraphEditorError, ValueError):
    """Raised when a JSON document does not describe a graph."""
    pass


class LoadParseError(GraphParseError):
    """Persisted graph data is corrupt. Treated as "no saved graph"."""
    pass


class ImportParseError(GraphParseError):
    """
    An uploaded file could not be imported.

    The message is safe to show to the user.
    """

    def __init__(self, message: str = "Failed to import graph. Please check the file format.",
                 detail: str = ""):
        super().__init__(message)
        self.detail = detail
