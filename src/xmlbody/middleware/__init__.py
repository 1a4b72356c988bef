from .xml_body import XMLBodyParserMiddleware

__all__ = ["XMLBodyParserMiddleware"]
