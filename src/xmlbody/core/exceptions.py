"""Errors raised while consuming and parsing XML request bodies."""
from typing import Any, Optional


class XMLParseError(ValueError):
    """Raised by converters when the document is not well-formed or not allowed."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class BodyParserError(Exception):
    """
    Base class for errors that end a request with a client error.

    Subclasses define the HTTP status and a machine-readable error code.
    """

    status_code: int = 400
    error: str = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message}


class PayloadTooLarge(BodyParserError):
    """The request body exceeds the configured limit."""

    status_code = 413
    error = "payload_too_large"

    def __init__(self, max_size: int):
        super().__init__(f"Request body too large. Maximum size is {max_size} bytes.")
        self.max_size = max_size

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["max_size"] = self.max_size
        return data


class MalformedXML(BodyParserError):
    """The request body could not be parsed as XML."""

    status_code = 400
    error = "malformed_xml"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column

    @classmethod
    def from_parse_error(cls, exc: XMLParseError) -> "MalformedXML":
        return cls(f"Invalid XML: {exc.message}", line=exc.line, column=exc.column)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["line"] = self.line
        data["column"] = self.column
        return data
