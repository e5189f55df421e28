"""Exceptions raised by funccatalog.

File read failures are not wrapped: they surface as the original ``OSError``.
"""


class FuncCatalogError(Exception):
    """Base class for funccatalog errors."""


class SourceUnavailableError(FuncCatalogError):
    """A function has no defining file, or its definition cannot be found in it."""

    def __init__(self, function_name: str, reason: str):
        self.function_name = function_name
        self.reason = reason
        super().__init__(f"Source unavailable for {function_name}: {reason}")


class MalformedSourceError(FuncCatalogError):
    """The tokenizer input could not be lexed."""


class ConfigurationError(FuncCatalogError, ValueError):
    """Invalid catalog settings."""
