"""
XML-to-structure conversion.

Documents are turned into plain dicts, lists and strings:

* attributes are stored under ``attr_key`` (``"$"``),
* text is stored under ``char_key`` (``"_"``) or replaces the element
  entirely when the element only holds text,
* child elements are stored by tag name, as a list when ``explicit_array``
  is set or when the same tag occurs more than once.

Parsing uses defusedxml, so DTDs, entity declarations and external
references are rejected instead of being expanded. Namespace processing is
always on: a prefix that is used without being declared (``<p:a/>``) makes
the document malformed.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser, ParseError

from .config import ParseOptions
from .exceptions import XMLParseError
from .logging import get_logger


logger = get_logger(__name__)

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

_MULTI_WHITESPACE = re.compile(r"\s{2,}")


class XMLConverter(ABC):
    """Base class for XML-to-structure converters."""

    @abstractmethod
    def parse(self, text: str, options: ParseOptions) -> Any:
        """
        Convert an XML document into a structured value.

        Raises:
            XMLParseError: When the document is malformed or not allowed.
        """


@dataclass
class _Frame:
    """An element that is still open."""
    name: str
    node: dict[str, Any]
    text: list[str] = field(default_factory=list)


class StructureBuilder:
    """
    Parser target that builds the structured value from parser events.

    Namespace declarations are tracked per element so qualified names can
    be reported with the prefix that the document used.
    """

    def __init__(self, options: ParseOptions):
        self.options = options
        self.result: Any = None
        self._stack: list[_Frame] = []
        # A new level is started upfront, as start_ns() is called before start()
        self._ns_stack: list[dict[str, str]] = [{}]

    def start_ns(self, prefix: str, uri: str) -> None:
        self._ns_stack[-1][prefix] = uri

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        options = self.options
        name = self._qualify(tag)
        if options.normalize_tags:
            name = name.lower()

        attrs: dict[str, str] = {}
        if options.include_namespace_declarations:
            for prefix, uri in self._ns_stack[-1].items():
                attrs[f"xmlns:{prefix}" if prefix else "xmlns"] = uri
        for key, value in attrib.items():
            attrs[self._qualify(key)] = value

        node: dict[str, Any] = {}
        if attrs and not options.ignore_attrs:
            if options.merge_attrs:
                for key, value in attrs.items():
                    self._assign_or_push(node, key, value)
            else:
                node[options.attr_key] = attrs

        self._ns_stack.append({})  # reserve level for child tags
        self._stack.append(_Frame(name, node))

    def data(self, text: str) -> None:
        if self._stack:
            self._stack[-1].text.append(text)

    def end(self, tag: str) -> None:
        options = self.options
        frame = self._stack.pop()
        self._ns_stack.pop()
        # Declarations made on this element go out of scope for its siblings
        self._ns_stack[-1].clear()
        node = frame.node

        text = "".join(frame.text)
        if text.strip():
            node[options.char_key] = self._clean_text(text)
            empty_value = ""
        else:
            empty_value = self._clean_text(text)

        value: Any = node
        if len(node) == 1 and options.char_key in node and not options.explicit_charkey:
            value = node[options.char_key]
        elif not node:
            value = options.empty_tag if options.empty_tag != "" else empty_value

        if self._stack:
            self._assign_or_push(self._stack[-1].node, frame.name, value)
        elif options.explicit_root:
            self.result = {frame.name: value}
        else:
            self.result = value

    def close(self) -> Any:
        return self.result

    def _clean_text(self, text: str) -> str:
        if self.options.trim:
            text = text.strip()
        if self.options.normalize:
            text = _MULTI_WHITESPACE.sub(" ", text).strip()
        return text

    def _assign_or_push(self, node: dict[str, Any], key: str, value: Any) -> None:
        if key not in node:
            node[key] = [value] if self.options.explicit_array else value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    def _qualify(self, name: str) -> str:
        """Translate ``{uri}local`` back into ``prefix:local``."""
        if not name.startswith("{"):
            return name

        uri, local_name = name[1:].split("}", 1)
        for level in reversed(self._ns_stack):
            for prefix, declared_uri in level.items():
                if declared_uri == uri:
                    return f"{prefix}:{local_name}" if prefix else local_name

        if uri == XML_NAMESPACE:
            return f"xml:{local_name}"
        return local_name


class DefusedXMLConverter(XMLConverter):
    """Converter backed by the defusedxml-hardened expat parser."""

    def parse(self, text: str, options: ParseOptions) -> Any:
        # Passing a custom target potentially circumvents defusedxml,
        # so the parser is configured explicitly:
        parser = DefusedXMLParser(
            target=StructureBuilder(options),
            forbid_dtd=True,
            forbid_entities=True,
            forbid_external=True,
        )

        try:
            parser.feed(text)
            return parser.close()
        except ParseError as e:
            line, column = getattr(e, "position", (None, None))
            logger.debug(f"XML parse error at line {line}, column {column}: {e}")
            raise XMLParseError(str(e), line=line, column=column) from e
        except DefusedXmlException as e:
            logger.debug(f"Forbidden XML construct: {e!r}")
            raise XMLParseError(f"forbidden XML construct: {e}") from e
