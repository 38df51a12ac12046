"""
Graph build exceptions.
"""
from typing import Optional


class GraphBuildError(Exception):
    """Base exception for graph builds."""

    pass


class MalformedInputError(GraphBuildError):
    """The document is not valid JSON or holds a value JSON cannot express."""

    def __init__(self, message: str, field_key: Optional[str] = None,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.field_key = field_key
        self.line = line
        self.column = column
        if field_key is not None:
            message = f"{message} (field: {field_key!r})"
        elif line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class InvalidConfigurationError(GraphBuildError):
    """Build options were rejected before traversal."""

    def __init__(self, message: str, errors: Optional[list] = None):
        self.errors = errors or []
        super().__init__(message)
