"""Tests for the UPG facade."""

from __future__ import annotations

import logging

import pytest

from upg import UPG, EnrichedProject, GeneratedProject, __version__
from upg.errors import IncompatibleStack, InvalidSeed

CLICK_STACK = {"archetype": "cli", "language": "python", "framework": "click"}


@pytest.fixture
def upg():
    logger = logging.getLogger("upg")
    level = logger.level
    yield UPG(config={"UPG_ENRICH_DEPTH": "standard", "UPG_DEFAULT_SEED": ""})
    logger.setLevel(level)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

class TestGenerate:
    @pytest.mark.asyncio
    async def test_pass_one_only(self, upg):
        project = await upg.generate(42, CLICK_STACK)
        assert isinstance(project, GeneratedProject)
        assert not isinstance(project, EnrichedProject)
        assert project.id == "python-click-42"
        assert project.metadata.upg_version == __version__

    @pytest.mark.asyncio
    async def test_string_seed(self, upg):
        a = await upg.generate("42", CLICK_STACK)
        b = await upg.generate(42, CLICK_STACK)
        assert a.files == b.files

    @pytest.mark.asyncio
    async def test_missing_seed(self, upg):
        with pytest.raises(InvalidSeed):
            await upg.generate(None)

    @pytest.mark.asyncio
    async def test_default_seed_from_config(self):
        project = await UPG(config={"UPG_DEFAULT_SEED": "7"}).generate(None, CLICK_STACK)
        assert project.seed == 7

    @pytest.mark.asyncio
    async def test_bad_seed(self, upg):
        with pytest.raises(InvalidSeed):
            await upg.generate("-3")

    @pytest.mark.asyncio
    async def test_incompatible(self, upg):
        with pytest.raises(IncompatibleStack):
            await upg.generate(1, {"archetype": "web", "language": "rust"})

    @pytest.mark.asyncio
    async def test_version_from_config(self):
        project = await UPG(config={"UPG_VERSION": "2.0.0"}).generate(3, CLICK_STACK)
        assert project.metadata.upg_version == "2.0.0"


class TestEnrich:
    @pytest.mark.asyncio
    async def test_enriched(self, upg):
        project = await upg.generate(42, {**CLICK_STACK, "cicd": "github-actions"}, enrich=True)
        assert isinstance(project, EnrichedProject)
        assert project.enrichment.enriched
        assert project.enrichment.flags.depth == "standard"
        assert ".editorconfig" in project.files

    @pytest.mark.asyncio
    async def test_pass_one_output_unchanged_by_enrichment(self, upg):
        plain = await upg.generate(42, CLICK_STACK)
        enriched = await upg.generate(42, CLICK_STACK, enrich=True)
        for path, content in plain.files.items():
            if path not in enriched.enrichment.files_modified:
                assert enriched.files[path] == content

    @pytest.mark.asyncio
    async def test_depth_argument(self, upg):
        project = await upg.generate(42, CLICK_STACK, enrich=True, depth="minimal")
        assert project.enrichment.flags.depth == "minimal"

    @pytest.mark.asyncio
    async def test_depth_from_config(self):
        project = await UPG(config={"UPG_ENRICH_DEPTH": "full"}).generate(42, CLICK_STACK, enrich=True)
        assert project.enrichment.flags.depth == "full"

    def test_unknown_depth_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="upg.api.facade"):
            depth = UPG(config={"UPG_ENRICH_DEPTH": "extreme"}).default_depth
        assert depth == "standard"
        assert "extreme" in caplog.text


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueries:
    def test_validate(self, upg):
        assert upg.validate(CLICK_STACK).valid
        assert not upg.validate({"archetype": "web", "language": "go"}).valid

    def test_valid_options(self, upg):
        assert upg.valid_options("framework", {"archetype": "cli", "language": "python"}) == ["click", "argparse"]

    def test_config_is_copy(self, upg):
        upg.config["UPG_ENRICH_DEPTH"] = "full"
        assert upg.default_depth == "standard"


class TestExportManifest:
    @pytest.mark.asyncio
    async def test_export_generated(self, upg):
        project = await upg.generate(42, CLICK_STACK)
        manifest = upg.export_manifest(project)
        assert manifest.metadata.name == project.name
        assert manifest.enrichment is None
        assert "python" in manifest.metadata.tags

    @pytest.mark.asyncio
    async def test_export_enriched_carries_flags(self, upg):
        project = await upg.generate(42, CLICK_STACK, enrich=True, depth="full")
        manifest = upg.export_manifest(project, version="3.1.0")
        assert manifest.metadata.version == "3.1.0"
        assert manifest.enrichment["depth"] == "full"
