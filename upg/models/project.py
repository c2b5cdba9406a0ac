"""Generated and enriched project records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from upg.config import DEFAULT_UPG_VERSION
from upg.models.enrichment import EnrichmentMetadata
from upg.models.stack import TechStack

# Ordered mapping of forward-slash relative path -> full text content.
FileMap = dict[str, str]


class GenerationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_at: str
    upg_version: str = DEFAULT_UPG_VERSION
    duration_ms: float = 0.0
    constraints_applied: list[str] = Field(default_factory=list)


class GeneratedProject(BaseModel):
    """The artifact of Pass 1.

    Never written after construction; the enricher reads it and builds a
    new record rather than touching this one.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    seed: int
    name: str
    stack: TechStack
    files: FileMap = Field(default_factory=dict)
    metadata: GenerationMetadata

    @property
    def file_count(self) -> int:
        return len(self.files)


class EnrichedProject(GeneratedProject):
    """A generated project plus the enrichment diff summary."""

    enrichment: EnrichmentMetadata
