"""
XML body parsing middleware.

Parses request bodies with an XML Content-Type and stores the result on
``request.state`` (attribute ``body`` unless configured otherwise).
Other requests pass through untouched.
"""
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import BodyParserConfig
from ..core.converter import XMLConverter
from ..core.interceptor import BodyInterceptor, Outcome


class XMLBodyParserMiddleware(BaseHTTPMiddleware):
    """
    Middleware that parses XML request bodies.

    - Non-XML requests are passed on without reading the body
    - Parsed bodies are stored in request.state for downstream handlers
    - Returns 400 for malformed XML and 413 for oversized bodies

    Options are given either as a ``BodyParserConfig`` or as keyword
    arguments (``type``, ``xml``, ``limit``, ``encoding``, ``key``,
    ``allow_empty``, ``match``).
    """

    def __init__(
        self,
        app,
        config: Optional[BodyParserConfig] = None,
        converter: Optional[XMLConverter] = None,
        **options: Any,
    ):
        super().__init__(app)
        if config is not None and options:
            raise TypeError("Pass either a BodyParserConfig or keyword options, not both")
        self.config = config or BodyParserConfig(**options)
        self.interceptor = BodyInterceptor(self.config, converter)

    async def dispatch(self, request: Request, call_next) -> Response:
        result = await self.interceptor.intercept(request)

        if result.outcome is Outcome.REJECTED:
            return JSONResponse(
                status_code=result.error.status_code,
                content=result.error.to_dict(),
            )

        if result.outcome is Outcome.PARSED:
            setattr(request.state, self.config.key, result.body)

        return await call_next(request)
