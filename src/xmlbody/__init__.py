"""XML request-body parsing middleware for Starlette and FastAPI."""
from .core.config import BodyParserConfig, ParseOptions
from .core.exceptions import BodyParserError, MalformedXML, PayloadTooLarge, XMLParseError
from .core.interceptor import BodyInterceptor, InterceptResult, Outcome
from .middleware.xml_body import XMLBodyParserMiddleware

__version__ = "1.0.0"

__all__ = [
    "BodyInterceptor",
    "BodyParserConfig",
    "BodyParserError",
    "InterceptResult",
    "MalformedXML",
    "Outcome",
    "ParseOptions",
    "PayloadTooLarge",
    "XMLBodyParserMiddleware",
    "XMLParseError",
]
