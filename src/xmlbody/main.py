"""
XML body parser echo service.

Routes:
- POST / -> echoes the parsed XML body as JSON (204 when nothing was parsed)
- GET /health -> liveness check

Run with: uvicorn xmlbody.main:app
"""
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from .core.config import BodyParserConfig
from .core.logging import get_logger, setup_logging
from .middleware.xml_body import XMLBodyParserMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    config = app.state.xml_body_config
    logger.info(
        f"XML body parser echo service starting (types={list(config.types)}, limit={config.limit})"
    )
    yield
    logger.info("Shutting down...")


def create_app(**options: Any) -> FastAPI:
    """
    Build the echo application.

    Keyword options are passed to ``XMLBodyParserMiddleware``.
    """
    app = FastAPI(
        title="XML Body Parser",
        description="Echoes XML request bodies as parsed JSON",
        lifespan=lifespan,
    )

    config = BodyParserConfig(**options)
    app.state.xml_body_config = config
    app.add_middleware(XMLBodyParserMiddleware, config=config)
    key = config.key

    @app.api_route("/", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def echo(request: Request):
        if request.method != "POST":
            raise HTTPException(status_code=405, detail="Method Not Allowed")

        body = getattr(request.state, key, None)
        if body is None:
            return Response(status_code=204)
        return JSONResponse(status_code=200, content=body)

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()
