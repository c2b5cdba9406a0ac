"""Pass 2 engine: introspection, enrichment, stack inference and export."""

from upg.enrichment.engine.enricher import ProjectEnricher
from upg.enrichment.engine.introspector import MANIFEST_PRECEDENCE, ProjectIntrospector, glob_to_regex
from upg.enrichment.engine.manifest_exporter import ExportedManifest, export_manifest
from upg.enrichment.engine.stack_inferrer import InferredStack, collect_dependencies, infer_stack

__all__ = [
    "ExportedManifest",
    "InferredStack",
    "MANIFEST_PRECEDENCE",
    "ProjectEnricher",
    "ProjectIntrospector",
    "collect_dependencies",
    "export_manifest",
    "glob_to_regex",
    "infer_stack",
]
