from __future__ import annotations

from dataclasses import dataclass, field

from page_meta_core.schema import Alternate, Icon, LinkTag, MetaTag


@dataclass(frozen=True)
class RequestFacts:
    requested_url: str
    final_url: str
    status: int
    content_type: str | None = None


@dataclass
class AccumulatedState:
    """Per-request extraction state. Owned by exactly one MetaAccumulator."""

    lang: str | None = None
    title_chunks: list[str] = field(default_factory=list)
    canonical: str | None = None
    charset: str | None = None

    meta_tags: list[MetaTag] = field(default_factory=list)
    link_tags: list[LinkTag] = field(default_factory=list)
    icons: list[Icon] = field(default_factory=list)
    alternates: list[Alternate] = field(default_factory=list)

    og: dict[str, str] = field(default_factory=dict)
    twitter: dict[str, str] = field(default_factory=dict)
    meta_by_name: dict[str, str] = field(default_factory=dict)
    meta_by_property: dict[str, str] = field(default_factory=dict)
