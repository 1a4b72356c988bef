"""
Configuration for the XML body parser.

Environment-driven defaults live in ``Settings``; per-middleware options are
immutable records built once at startup and shared by all requests.
"""
from typing import Any, Callable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_XML_TYPES = (
    "application/xml",
    "text/xml",
    "application/rss+xml",
    "application/atom+xml",
)


class Settings(BaseSettings):
    """Application settings"""

    # Maximum accepted XML body size in bytes (1 MiB)
    XML_BODY_LIMIT: int = 1024 * 1024

    # Empty XML bodies are rejected unless this is enabled
    XML_BODY_ALLOW_EMPTY: bool = False

    XML_BODY_ENCODING: str = "utf-8"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()


class ParseOptions(BaseModel):
    """
    Options for the XML-to-structure converter.

    Accepts both the snake_case field names and the camelCase names
    (``explicitArray``, ``normalizeTags``, ...). Unknown options are kept
    and forwarded to the converter as-is.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    normalize: bool = False
    normalize_tags: bool = Field(False, alias="normalizeTags")
    explicit_array: bool = Field(True, alias="explicitArray")
    trim: bool = False
    explicit_root: bool = Field(True, alias="explicitRoot")
    ignore_attrs: bool = Field(False, alias="ignoreAttrs")
    merge_attrs: bool = Field(False, alias="mergeAttrs")
    attr_key: str = Field("$", alias="attrkey")
    char_key: str = Field("_", alias="charkey")
    explicit_charkey: bool = Field(False, alias="explicitCharkey")
    empty_tag: Any = Field("", alias="emptyTag")
    include_namespace_declarations: bool = Field(True, alias="includeXmlns")


class BodyParserConfig(BaseModel):
    """
    Middleware configuration.

    ``type`` may be a single media type or a sequence of them; either form
    is normalized into one lower-cased tuple.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    types: tuple[str, ...] = Field(
        DEFAULT_XML_TYPES, validation_alias=AliasChoices("type", "types")
    )
    match: Optional[Callable[[str], bool]] = None
    xml: ParseOptions = Field(default_factory=ParseOptions)
    limit: int = Field(default_factory=lambda: settings.XML_BODY_LIMIT, gt=0)
    encoding: str = Field(default_factory=lambda: settings.XML_BODY_ENCODING)
    key: str = "body"
    allow_empty: bool = Field(default_factory=lambda: settings.XML_BODY_ALLOW_EMPTY)

    @field_validator("types", mode="before")
    @classmethod
    def _normalize_types(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return DEFAULT_XML_TYPES
        if isinstance(value, str):
            value = [value]

        normalized: list[str] = []
        for item in value:
            media_type = item.split(";", 1)[0].strip().lower()
            if media_type and media_type not in normalized:
                normalized.append(media_type)
        return tuple(normalized)
