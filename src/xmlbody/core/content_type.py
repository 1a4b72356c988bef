"""Content-Type classification for XML bodies."""
from typing import Callable, Iterable, Optional


def normalize_media_type(content_type: Optional[str]) -> str:
    """
    Reduce a Content-Type header value to its bare media type.

    ``"Text/XML; charset=utf-8"`` becomes ``"text/xml"``. Missing values
    become an empty string.
    """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class ContentTypeMatcher:
    """
    Decide whether a request's Content-Type should be parsed as XML.

    A media type matches when it is in the configured set, or when the
    optional predicate accepts it. An empty media type never matches.
    """

    def __init__(
        self,
        types: Iterable[str],
        predicate: Optional[Callable[[str], bool]] = None,
    ):
        self.types = frozenset(normalize_media_type(t) for t in types) - {""}
        self.predicate = predicate

    def matches(self, content_type: Optional[str]) -> bool:
        media_type = normalize_media_type(content_type)
        if not media_type:
            return False
        if media_type in self.types:
            return True
        if self.predicate is not None:
            return bool(self.predicate(media_type))
        return False

    def __repr__(self) -> str:
        return f"ContentTypeMatcher(types={sorted(self.types)!r})"
