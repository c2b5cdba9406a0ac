"""Enrichment flags, metadata and parsed manifests."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EnrichmentDepth(str, Enum):
    MINIMAL = "minimal"
    STANDARD = "standard"
    FULL = "full"


class EnrichmentFlags(BaseModel):
    """Toggles read by enrichment strategies' ``matches`` predicates.

    The core never interprets these; each strategy decides which ones it
    honours.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True, extra="forbid")

    enabled: bool = True
    depth: EnrichmentDepth = EnrichmentDepth.STANDARD
    cicd: bool = True
    release: bool = True
    fill_logic: bool = True
    tests: bool = True
    docker_prod: bool = True
    linting: bool = True
    env_files: bool = True
    docs: bool = True

    @classmethod
    def for_depth(cls, depth: EnrichmentDepth | str, **overrides: Any) -> EnrichmentFlags:
        """Return the default flags for *depth* with *overrides* applied."""
        base = DEFAULT_ENRICHMENT_FLAGS[EnrichmentDepth(depth)]
        if not overrides:
            return base
        return cls.model_validate({**base.model_dump(), **overrides})


DEFAULT_ENRICHMENT_FLAGS: dict[EnrichmentDepth, EnrichmentFlags] = {
    EnrichmentDepth.MINIMAL: EnrichmentFlags(
        depth=EnrichmentDepth.MINIMAL,
        cicd=True,
        release=False,
        fill_logic=False,
        tests=False,
        docker_prod=False,
        linting=True,
        env_files=True,
        docs=True,
    ),
    EnrichmentDepth.STANDARD: EnrichmentFlags(depth=EnrichmentDepth.STANDARD),
    EnrichmentDepth.FULL: EnrichmentFlags(depth=EnrichmentDepth.FULL),
}


class EnrichmentMetadata(BaseModel):
    """Diff summary of one enrichment run."""

    model_config = ConfigDict(frozen=True)

    enriched: bool
    strategies_applied: list[str] = Field(default_factory=list)
    flags: EnrichmentFlags = Field(default_factory=EnrichmentFlags)
    duration_ms: float = 0.0
    files_added: list[str] = Field(default_factory=list)
    files_modified: list[str] = Field(default_factory=list)


ManifestType = Literal["npm", "cargo", "python", "gomod", "maven", "gradle", "gemspec", "composer", "unknown"]


class ParsedManifest(BaseModel):
    """Ecosystem-neutral view of a project's package manifest."""

    type: ManifestType
    name: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict)
    scripts: dict[str, str] = Field(default_factory=dict)
    raw: Any = None
