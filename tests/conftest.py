"""
Pytest configuration and fixtures for xmlbody tests
"""
import sys
from pathlib import Path
from typing import Optional

import pytest
from starlette.requests import Request

# Add src to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


BOB_RAW_SANITIZED = "<customer><name>Bob</name></customer>"
BOB_EXPLICIT = {"customer": {"name": ["Bob"]}}


class RecordingReceive:
    """ASGI receive callable that replays body chunks and counts calls."""

    def __init__(self, chunks: list[bytes], disconnect: bool = False):
        self.messages = [
            {
                "type": "http.request",
                "body": chunk,
                "more_body": disconnect or index < len(chunks) - 1,
            }
            for index, chunk in enumerate(chunks)
        ]
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.messages:
            return self.messages.pop(0)
        return {"type": "http.disconnect"}


def build_request(
    body: bytes = b"",
    content_type: Optional[str] = None,
    chunks: Optional[list[bytes]] = None,
    headers: Optional[dict[str, str]] = None,
    method: str = "POST",
    disconnect: bool = False,
) -> Request:
    """Build a real Starlette request backed by an in-memory receive channel."""
    raw_headers = []
    if content_type is not None:
        raw_headers.append((b"content-type", content_type.encode("latin-1")))
    for name, value in (headers or {}).items():
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    scope = {
        "type": "http",
        "method": method,
        "path": "/",
        "query_string": b"",
        "headers": raw_headers,
    }
    receive = RecordingReceive(chunks if chunks is not None else [body], disconnect=disconnect)
    return Request(scope, receive)


@pytest.fixture
def make_request():
    """Factory fixture for requests, see build_request()."""
    return build_request
