"""ProjectEnricher: Pass 2 of the pipeline.

Takes a finished :class:`~upg.models.GeneratedProject` and applies
enrichment strategies (CI, tests, Docker, docs ...) to a copy of its files.
The source project is never changed.

Usage::

    from upg.enrichment import ProjectEnricher, ALL_ENRICHMENT_STRATEGIES

    enricher = ProjectEnricher(project, assembler.rng, flags=EnrichmentFlags())
    enricher.register_strategies(ALL_ENRICHMENT_STRATEGIES)
    enriched = await enricher.enrich()
"""

from __future__ import annotations

import logging
import time
from typing import Iterable

from upg.engine.rng import RNGFacade, SeededRNG
from upg.engine.strategy import EnrichmentContext, EnrichmentStrategy, StrategyPipeline
from upg.enrichment.engine.introspector import ProjectIntrospector
from upg.models import (
    EnrichedProject,
    EnrichmentFlags,
    EnrichmentMetadata,
    GeneratedProject,
)

logger = logging.getLogger(__name__)


class ProjectEnricher:
    """Apply enrichment strategies to a generated project.

    Parameters
    ----------
    source_project:
        Pass 1 output.  Read, never written.
    rng:
        Pass 1's random source.  It is forked here, so Pass 2 draws an
        independent sequence and leaves the parent untouched.
    flags:
        Enrichment toggles handed to every strategy's ``matches``.
    strategies:
        Initial enrichment strategies.
    """

    def __init__(
        self,
        source_project: GeneratedProject,
        rng: SeededRNG,
        *,
        flags: EnrichmentFlags | None = None,
        strategies: Iterable[EnrichmentStrategy] = (),
    ) -> None:
        self._source = source_project
        self._rng = rng.fork()
        self._flags = flags or EnrichmentFlags()
        self._pipeline = StrategyPipeline(strategies)

    @property
    def flags(self) -> EnrichmentFlags:
        return self._flags

    @property
    def strategies(self) -> list[EnrichmentStrategy]:
        return self._pipeline.strategies  # type: ignore[return-value]

    def register_strategy(self, strategy: EnrichmentStrategy) -> ProjectEnricher:
        self._pipeline.register(strategy)
        return self

    def register_strategies(self, strategies: Iterable[EnrichmentStrategy]) -> ProjectEnricher:
        self._pipeline.register_all(strategies)
        return self

    async def enrich(self) -> EnrichedProject:
        """Run matching strategies over a copy of the source files."""
        start = time.perf_counter()
        source = self._source
        files = dict(source.files)
        original_paths = set(files)

        applied: list[str] = []
        if self._flags.enabled:
            context = EnrichmentContext(
                source_project=source,
                files=files,
                stack=source.stack,
                project_name=source.name,
                flags=self._flags,
                introspect=ProjectIntrospector(source.files, source.stack),
                rng=RNGFacade(self._rng),
            )
            applied = await self._pipeline.run(source.stack, self._flags, context)
        else:
            logger.info("Enrichment disabled for %s", source.id)

        files_added = [path for path in files if path not in original_paths]
        files_modified = [
            path for path in source.files if path in files and files[path] != source.files[path]
        ]
        duration_ms = (time.perf_counter() - start) * 1000

        enrichment = EnrichmentMetadata(
            enriched=self._flags.enabled,
            strategies_applied=applied,
            flags=self._flags,
            duration_ms=duration_ms,
            files_added=files_added,
            files_modified=files_modified,
        )
        metadata = source.metadata.model_copy(
            update={
                "duration_ms": source.metadata.duration_ms + duration_ms,
                "constraints_applied": [
                    *source.metadata.constraints_applied,
                    *(f"enrich:{strategy_id}" for strategy_id in applied),
                ],
            }
        )
        logger.info(
            "Enriched %s: %d added, %d modified by %d strategies",
            source.id,
            len(files_added),
            len(files_modified),
            len(applied),
        )
        return EnrichedProject(
            id=source.id,
            seed=source.seed,
            name=source.name,
            stack=source.stack,
            files=files,
            metadata=metadata,
            enrichment=enrichment,
        )
