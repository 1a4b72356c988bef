"""Core modules for the XML body parser."""
from .config import settings
from .converter import DefusedXMLConverter, XMLConverter

__all__ = [
    "DefusedXMLConverter",
    "XMLConverter",
    "settings",
]
