"""Pass 2: enrich a generated project without touching the original."""

from upg.enrichment.engine import (
    MANIFEST_PRECEDENCE,
    ExportedManifest,
    InferredStack,
    ProjectEnricher,
    ProjectIntrospector,
    export_manifest,
    infer_stack,
)
from upg.enrichment.strategies import ALL_ENRICHMENT_STRATEGIES

__all__ = [
    "ALL_ENRICHMENT_STRATEGIES",
    "ExportedManifest",
    "InferredStack",
    "MANIFEST_PRECEDENCE",
    "ProjectEnricher",
    "ProjectIntrospector",
    "export_manifest",
    "infer_stack",
]
