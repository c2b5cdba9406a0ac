"""UPG: one entry point over both passes.

Usage::

    from upg import UPG

    upg = UPG()
    project = await upg.generate(42, {"archetype": "cli", "language": "python"})
    enriched = await upg.generate(42, enrich=True, depth="full")
"""

from __future__ import annotations

import logging
from typing import Iterable

from upg.config import DEFAULT_UPG_VERSION, ConfigManager, configure_logging
from upg.engine.assembler import ProjectAssembler
from upg.engine.constraints import ConstraintValidation, get_valid_options, validate_stack
from upg.engine.seed import parse_seed
from upg.engine.strategy import EnrichmentStrategy, GenerationStrategy
from upg.enrichment import ALL_ENRICHMENT_STRATEGIES, ExportedManifest, ProjectEnricher
from upg.enrichment import export_manifest as _export_manifest
from upg.errors import InvalidSeed
from upg.models import (
    EnrichedProject,
    EnrichmentDepth,
    EnrichmentFlags,
    GeneratedProject,
    StackLike,
)
from upg.strategies import ALL_STRATEGIES

logger = logging.getLogger(__name__)


class UPG:
    """Generate (and optionally enrich) projects from seeds.

    Parameters
    ----------
    config:
        Settings as returned by :meth:`ConfigManager.load_config`.  Loaded
        from the environment when omitted.
    strategies:
        Pass 1 strategies.
    enrichment_strategies:
        Pass 2 strategies.
    """

    def __init__(
        self,
        config: dict[str, str] | None = None,
        strategies: Iterable[GenerationStrategy] = ALL_STRATEGIES,
        enrichment_strategies: Iterable[EnrichmentStrategy] = ALL_ENRICHMENT_STRATEGIES,
    ) -> None:
        self._config = config if config is not None else ConfigManager().load_config()
        self._strategies = tuple(strategies)
        self._enrichment_strategies = tuple(enrichment_strategies)
        if self._config.get("UPG_LOG_LEVEL"):
            configure_logging(self._config["UPG_LOG_LEVEL"])

    @property
    def config(self) -> dict[str, str]:
        return dict(self._config)

    @property
    def default_depth(self) -> EnrichmentDepth:
        raw = self._config.get("UPG_ENRICH_DEPTH", EnrichmentDepth.STANDARD.value)
        try:
            return EnrichmentDepth(raw)
        except ValueError:
            logger.warning("Unknown UPG_ENRICH_DEPTH %r; using standard", raw)
            return EnrichmentDepth.STANDARD

    def _resolve_seed(self, seed: int | str | None) -> int:
        if seed is None:
            seed = self._config.get("UPG_DEFAULT_SEED") or None
            if seed is None:
                raise InvalidSeed("A seed is required (pass one or set UPG_DEFAULT_SEED)")
        if isinstance(seed, str):
            return parse_seed(seed)
        return seed

    async def generate(
        self,
        seed: int | str | None,
        stack: StackLike = None,
        *,
        enrich: bool = False,
        depth: EnrichmentDepth | str | None = None,
        flags: EnrichmentFlags | None = None,
        project_name: str | None = None,
    ) -> GeneratedProject | EnrichedProject:
        """Run Pass 1 and, when *enrich* is set, Pass 2.

        *flags* wins over *depth*; *depth* falls back to ``UPG_ENRICH_DEPTH``.
        """
        assembler = ProjectAssembler(
            self._resolve_seed(seed),
            stack,
            project_name=project_name,
            upg_version=self._config.get("UPG_VERSION") or DEFAULT_UPG_VERSION,
            strategies=self._strategies,
        )
        project = await assembler.generate()
        if not enrich:
            return project

        if flags is None:
            flags = EnrichmentFlags.for_depth(depth or self.default_depth)
        enricher = ProjectEnricher(
            project,
            assembler.rng,
            flags=flags,
            strategies=self._enrichment_strategies,
        )
        return await enricher.enrich()

    def validate(self, stack: StackLike) -> ConstraintValidation:
        return validate_stack(stack)

    def valid_options(self, dimension: str, stack: StackLike = None) -> list[str]:
        return get_valid_options(dimension, stack)

    def export_manifest(
        self,
        project: GeneratedProject,
        *,
        name: str | None = None,
        version: str | None = None,
        enrichment_flags: EnrichmentFlags | None = None,
    ) -> ExportedManifest:
        """Describe *project* as an ``upg.yaml`` manifest."""
        flags = enrichment_flags
        if flags is None and isinstance(project, EnrichedProject):
            flags = project.enrichment.flags
        return _export_manifest(
            project.files,
            name=name or project.name,
            version=version,
            enrichment_flags=flags,
        )
