"""Reverse a file map into the ``upg.yaml`` manifest that would reproduce it."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

from upg.enrichment.engine.stack_inferrer import infer_stack
from upg.models import EnrichmentFlags

logger = logging.getLogger(__name__)

MANIFEST_API_VERSION = "upg/v1"


class ManifestMetadata(BaseModel):
    name: str
    version: str
    description: str
    tags: list[str] = Field(default_factory=list)


class ManifestPrompt(BaseModel):
    id: str
    type: str
    message: str
    default: str


class ManifestAction(BaseModel):
    type: str
    src: str
    dest: str


class ExportedManifest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(default=MANIFEST_API_VERSION, alias="apiVersion")
    metadata: ManifestMetadata
    prompts: list[ManifestPrompt] = Field(default_factory=list)
    actions: list[ManifestAction] = Field(default_factory=list)
    enrichment: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_yaml(self) -> str:
        """Serialise as YAML, keys in declaration order."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)


def export_manifest(
    files: Mapping[str, str],
    *,
    name: str | None = None,
    version: str | None = None,
    enrichment_flags: EnrichmentFlags | None = None,
) -> ExportedManifest:
    """Infer the stack behind *files* and describe it as a manifest."""
    stack = infer_stack(files).stack
    name = name or "exported-project"
    version = version or "1.0.0"

    tags = [stack.archetype, stack.language]
    if stack.framework != "none":
        tags.append(stack.framework)
    if stack.database != "none":
        tags.append(stack.database)

    description = f"Generated {stack.archetype} project using {stack.language}"
    if stack.framework != "none":
        description += f" + {stack.framework}"

    enrichment = enrichment_flags.model_dump(mode="json") if enrichment_flags else None
    logger.debug("Exporting manifest for %s (%s)", name, ", ".join(tags))
    return ExportedManifest(
        metadata=ManifestMetadata(name=name, version=version, description=description, tags=tags),
        prompts=[
            ManifestPrompt(id="project_name", type="string", message="Project name", default=name),
        ],
        actions=[
            ManifestAction(type="generate", src="template/", dest="{{ project_name }}"),
        ],
        enrichment=enrichment,
    )
