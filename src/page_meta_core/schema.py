from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

NON_HTML_ERROR = "non-html response"

# Read-only view over a private copy; serializes back to a plain dict.
FrozenMap = Annotated[
    Mapping[str, str],
    AfterValidator(lambda v: MappingProxyType(dict(v))),
    PlainSerializer(dict, return_type=dict[str, str]),
]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MetaTag(_Record):
    name: str | None = None
    property: str | None = None
    http_equiv: str | None = None
    charset: str | None = None
    content: str | None = None


class LinkTag(_Record):
    rels: tuple[str, ...]
    href: str | None = None
    hreflang: str | None = None
    type: str | None = None
    sizes: str | None = None


class Icon(_Record):
    href: str
    rel: str
    type: str | None = None
    sizes: str | None = None


class Alternate(_Record):
    href: str
    hreflang: str | None = None
    type: str | None = None
    title: str | None = None


class MetaExtractionResult(_Record):
    requested_url: str
    final_url: str
    status: int
    content_type: str | None = None

    lang: str | None = None
    title: str | None = None
    description: str | None = None
    canonical: str | None = None
    charset: str | None = None
    theme_color: str | None = None
    author: str | None = None
    keywords: str | None = None
    robots: str | None = None
    generator: str | None = None
    favicon: str | None = None

    icons: tuple[Icon, ...] = ()
    alternates: tuple[Alternate, ...] = ()

    og: FrozenMap = Field(default_factory=dict, validate_default=True)
    twitter: FrozenMap = Field(default_factory=dict, validate_default=True)

    meta_by_name: FrozenMap = Field(default_factory=dict, validate_default=True)
    meta_by_property: FrozenMap = Field(default_factory=dict, validate_default=True)
    meta_tags: tuple[MetaTag, ...] = ()
    link_tags: tuple[LinkTag, ...] = ()


class NonHtmlResult(_Record):
    requested_url: str
    final_url: str
    status: int
    content_type: str | None = None
    error: Literal["non-html response"] = NON_HTML_ERROR


class ErrorResponse(_Record):
    error: str


def to_dict(record: BaseModel) -> dict[str, Any]:
    """JSON-ready dict with camelCase keys; absent optional fields are omitted."""
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_json(record: BaseModel) -> str:
    return record.model_dump_json(by_alias=True, exclude_none=True)
