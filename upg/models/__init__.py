"""Records exchanged between the resolver, the passes and callers."""

from upg.models.enrichment import (
    DEFAULT_ENRICHMENT_FLAGS,
    EnrichmentDepth,
    EnrichmentFlags,
    EnrichmentMetadata,
    ManifestType,
    ParsedManifest,
)
from upg.models.project import EnrichedProject, FileMap, GeneratedProject, GenerationMetadata
from upg.models.stack import PartialStack, StackLike, TechStack, coerce_partial

__all__ = [
    "DEFAULT_ENRICHMENT_FLAGS",
    "EnrichedProject",
    "EnrichmentDepth",
    "EnrichmentFlags",
    "EnrichmentMetadata",
    "FileMap",
    "GeneratedProject",
    "GenerationMetadata",
    "ManifestType",
    "ParsedManifest",
    "PartialStack",
    "StackLike",
    "TechStack",
    "coerce_partial",
]
