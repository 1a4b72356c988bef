"""
Request classification and XML body consumption.

The interceptor decides per request whether the body is XML, reads it
within the configured size limit and converts it. The decision is returned
as an explicit ``InterceptResult`` so callers apply it themselves:

    Idle -> PASS_THROUGH
    Idle -> Consuming -> PARSED | REJECTED

Stream failures (client disconnects, cancellation) are not caught here;
they end the request at the framework level.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from starlette.requests import Request

from .config import BodyParserConfig
from .content_type import ContentTypeMatcher, normalize_media_type
from .converter import DefusedXMLConverter, XMLConverter
from .exceptions import BodyParserError, MalformedXML, PayloadTooLarge, XMLParseError
from .logging import get_logger


logger = get_logger(__name__)


class Outcome(str, Enum):
    PASS_THROUGH = "pass_through"
    PARSED = "parsed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class InterceptResult:
    """Outcome of intercepting a single request."""
    outcome: Outcome
    body: Any = None
    error: Optional[BodyParserError] = None


class BodyInterceptor:
    """
    Parses XML request bodies.

    Holds only immutable configuration, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(
        self,
        config: Optional[BodyParserConfig] = None,
        converter: Optional[XMLConverter] = None,
    ):
        self.config = config or BodyParserConfig()
        self.converter = converter or DefusedXMLConverter()
        self.matcher = ContentTypeMatcher(self.config.types, self.config.match)

    async def intercept(self, request: Request) -> InterceptResult:
        content_type = request.headers.get("content-type")
        if not self.matcher.matches(content_type):
            return InterceptResult(Outcome.PASS_THROUGH)

        media_type = normalize_media_type(content_type)
        try:
            raw = await self.read_body(request)
            body = self.parse_body(raw)
        except BodyParserError as e:
            logger.warning(
                f"XML body rejected: {e.message}",
                extra={"content_type": media_type, "outcome": Outcome.REJECTED.value, "error": e.error},
            )
            return InterceptResult(Outcome.REJECTED, error=e)

        logger.debug(
            f"XML body parsed ({len(raw)} bytes)",
            extra={"content_type": media_type, "outcome": Outcome.PARSED.value, "size": len(raw)},
        )
        return InterceptResult(Outcome.PARSED, body=body)

    async def read_body(self, request: Request) -> bytes:
        """
        Read the complete request body, bounded by the configured limit.

        Raises:
            PayloadTooLarge: When Content-Length or the received data exceeds the limit.
        """
        limit = self.config.limit

        content_length = request.headers.get("content-length")
        if content_length:
            try:
                declared = int(content_length)
            except ValueError:
                # Invalid Content-Length, the stream below is still bounded
                declared = None
            if declared is not None and declared > limit:
                raise PayloadTooLarge(limit)

        buffer = bytearray()
        async for chunk in request.stream():
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise PayloadTooLarge(limit)

        body = bytes(buffer)
        # The stream can only be consumed once; keep the bytes for downstream handlers.
        request._body = body
        return body

    def parse_body(self, raw: bytes) -> Any:
        """
        Convert raw body bytes into the structured value.

        Raises:
            MalformedXML: When the body can't be decoded or parsed.
        """
        encoding = self.config.encoding
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError as e:
            raise MalformedXML(f"Request body is not valid {encoding}: {e.reason}") from e

        if text.startswith("\ufeff"):
            text = text[1:]

        if not text.strip():
            if self.config.allow_empty:
                return {}
            raise MalformedXML("Invalid XML: empty document")

        try:
            return self.converter.parse(text, self.config.xml)
        except XMLParseError as e:
            raise MalformedXML.from_parse_error(e) from e
