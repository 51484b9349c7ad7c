"""Exceptions raised by the copy-paste detector."""


class CPDError(Exception):
    """Base exception for all cpdscan errors."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR", details: dict | None = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(CPDError):
    """Raised when the option set is invalid. The run never starts."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="INVALID_CONFIGURATION", details=details)


class SourceLoadError(CPDError):
    """Raised when a source unit cannot be read or decoded."""

    def __init__(self, source_id: str, reason: str):
        super().__init__(
            f"Cannot load {source_id}: {reason}",
            code="LOAD_FAILED",
            details={"source_id": source_id, "reason": reason},
        )
        self.source_id = source_id

    def __reduce__(self):
        return (type(self), (self.source_id, self.details.get("reason", "")))


class LexicalError(CPDError):
    """Raised when a lexer cannot continue scanning a source unit.

    Lexers raise it without knowing which unit they scan; the tokenizer
    re-raises it with the source identity attached via ``with_source``.
    """

    def __init__(self, message: str, line: int, column: int = 0, source_id: str | None = None):
        location = f"{source_id}:{line}:{column}" if source_id else f"line {line}, column {column}"
        super().__init__(
            f"Lexical error at {location}: {message}",
            code="LEXICAL_ERROR",
            details={"source_id": source_id, "line": line, "column": column},
        )
        self.reason = message
        self.line = line
        self.column = column
        self.source_id = source_id

    def __reduce__(self):
        return (type(self), (self.reason, self.line, self.column, self.source_id))

    def with_source(self, source_id: str) -> "LexicalError":
        """Return a copy of this error bound to ``source_id``."""
        return LexicalError(self.reason, self.line, self.column, source_id=source_id)
