"""Tests for Pass 2: the ProjectEnricher engine."""

from __future__ import annotations

import pytest

from upg.engine.assembler import ProjectAssembler
from upg.engine.rng import SeededRNG
from upg.engine.strategy import EnrichmentStrategy
from upg.enrichment import ALL_ENRICHMENT_STRATEGIES, ProjectEnricher
from upg.enrichment.strategies import LintingStrategy, ReadmeEnrichStrategy
from upg.models import EnrichedProject, EnrichmentFlags
from upg.strategies import ALL_STRATEGIES

CLICK_STACK = {
    "archetype": "cli",
    "language": "python",
    "framework": "click",
    "packaging": "docker",
    "cicd": "github-actions",
}


async def _generated(seed: int = 42, stack=CLICK_STACK):
    assembler = ProjectAssembler(seed, stack, strategies=ALL_STRATEGIES)
    return assembler, await assembler.generate()


class SpyStrategy(EnrichmentStrategy):
    """Writes a file, then records what the introspector can see."""

    id = "spy"
    name = "Spy"
    priority = 0

    def __init__(self):
        self.seen_own_write: bool | None = None
        self.draw: float | None = None

    def matches(self, stack, flags):
        return True

    async def apply(self, context):
        context.files["spy.txt"] = "x"
        self.seen_own_write = context.introspect.has_file("spy.txt")
        self.draw = context.rng.float()


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

class TestIsolation:
    @pytest.mark.asyncio
    async def test_source_files_untouched(self):
        assembler, project = await _generated()
        before = dict(project.files)
        enricher = ProjectEnricher(project, assembler.rng, strategies=ALL_ENRICHMENT_STRATEGIES)
        enriched = await enricher.enrich()
        assert project.files == before
        assert enriched.files is not project.files

    @pytest.mark.asyncio
    async def test_introspector_reads_source_not_copy(self):
        assembler, project = await _generated()
        spy = SpyStrategy()
        await ProjectEnricher(project, assembler.rng, strategies=[spy]).enrich()
        assert spy.seen_own_write is False

    @pytest.mark.asyncio
    async def test_identity_preserved(self):
        assembler, project = await _generated()
        enriched = await ProjectEnricher(project, assembler.rng, strategies=ALL_ENRICHMENT_STRATEGIES).enrich()
        assert isinstance(enriched, EnrichedProject)
        assert enriched.id == project.id
        assert enriched.seed == project.seed
        assert enriched.name == project.name
        assert enriched.stack == project.stack


# ---------------------------------------------------------------------------
# Random source
# ---------------------------------------------------------------------------

class TestRandomSource:
    @pytest.mark.asyncio
    async def test_parent_advanced_by_one_draw(self):
        _, project = await _generated()
        rng, reference = SeededRNG(5), SeededRNG(5)
        ProjectEnricher(project, rng)
        reference.next_uint32()
        assert rng.next_uint32() == reference.next_uint32()

    @pytest.mark.asyncio
    async def test_strategy_draws_come_from_fork(self):
        _, project = await _generated()
        first, second = SpyStrategy(), SpyStrategy()
        await ProjectEnricher(project, SeededRNG(5), strategies=[first]).enrich()
        await ProjectEnricher(project, SeededRNG(5), strategies=[second]).enrich()
        assert first.draw == second.draw
        assert first.draw == SeededRNG(5).fork().float()


# ---------------------------------------------------------------------------
# Diff summary
# ---------------------------------------------------------------------------

class TestDiffSummary:
    @pytest.mark.asyncio
    async def test_files_added(self):
        assembler, project = await _generated()
        enriched = await ProjectEnricher(project, assembler.rng, strategies=[LintingStrategy()]).enrich()
        assert ".editorconfig" in enriched.enrichment.files_added
        assert all(path not in project.files for path in enriched.enrichment.files_added)
        assert enriched.enrichment.files_modified == []

    @pytest.mark.asyncio
    async def test_files_modified(self):
        assembler, project = await _generated()
        enriched = await ProjectEnricher(project, assembler.rng, strategies=[ReadmeEnrichStrategy()]).enrich()
        assert enriched.enrichment.files_modified == ["README.md"]
        assert enriched.enrichment.files_added == []

    @pytest.mark.asyncio
    async def test_metadata_extended(self):
        assembler, project = await _generated()
        enriched = await ProjectEnricher(project, assembler.rng, strategies=[LintingStrategy()]).enrich()
        applied = enriched.metadata.constraints_applied
        assert applied[: len(project.metadata.constraints_applied)] == project.metadata.constraints_applied
        assert applied[-1] == "enrich:enrich-linting"
        assert enriched.enrichment.strategies_applied == ["enrich-linting"]
        assert enriched.metadata.duration_ms >= project.metadata.duration_ms

    @pytest.mark.asyncio
    async def test_flags_recorded(self):
        assembler, project = await _generated()
        flags = EnrichmentFlags.for_depth("full")
        enriched = await ProjectEnricher(project, assembler.rng, flags=flags).enrich()
        assert enriched.enrichment.flags == flags
        assert enriched.enrichment.enriched is True


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

class TestFlags:
    @pytest.mark.asyncio
    async def test_disabled_runs_nothing(self):
        assembler, project = await _generated()
        flags = EnrichmentFlags(enabled=False)
        enriched = await ProjectEnricher(
            project, assembler.rng, flags=flags, strategies=ALL_ENRICHMENT_STRATEGIES
        ).enrich()
        assert enriched.enrichment.enriched is False
        assert enriched.enrichment.strategies_applied == []
        assert enriched.files == project.files

    @pytest.mark.asyncio
    async def test_minimal_skips_heavy_strategies(self):
        assembler, project = await _generated()
        enriched = await ProjectEnricher(
            project,
            assembler.rng,
            flags=EnrichmentFlags.for_depth("minimal"),
            strategies=ALL_ENRICHMENT_STRATEGIES,
        ).enrich()
        applied = enriched.enrichment.strategies_applied
        assert "enrich-release" not in applied
        assert "enrich-docker-prod" not in applied
        assert "enrich-test-config" not in applied
        assert "enrich-linting" in applied

    @pytest.mark.asyncio
    async def test_strategies_run_in_priority_order(self):
        assembler, project = await _generated()
        enriched = await ProjectEnricher(
            project,
            assembler.rng,
            flags=EnrichmentFlags.for_depth("full"),
            strategies=reversed(ALL_ENRICHMENT_STRATEGIES),
        ).enrich()
        applied = enriched.enrichment.strategies_applied
        priorities = {s.id: s.priority for s in ALL_ENRICHMENT_STRATEGIES}
        assert [priorities[sid] for sid in applied] == sorted(priorities[sid] for sid in applied)
        assert applied[-1] == "enrich-readme"

    @pytest.mark.asyncio
    async def test_register_strategies(self):
        assembler, project = await _generated()
        enricher = ProjectEnricher(project, assembler.rng)
        assert enricher.register_strategies(ALL_ENRICHMENT_STRATEGIES) is enricher
        assert len(enricher.strategies) == len(ALL_ENRICHMENT_STRATEGIES)
        assert enricher.flags == EnrichmentFlags()
