"""Typed exceptions for template materialization and fixture handling."""


class UnknownKind(ValueError):
    """Raised when a generator kind is not registered."""


class MalformedTemplate(ValueError):
    """Raised when a materialized body is required to be a document but is not."""


class InvalidSeed(ValueError):
    """Raised when a seed cannot be interpreted as an integer."""


class QueryError(ValueError):
    """Raised for malformed path expressions or paths missing from a document."""
