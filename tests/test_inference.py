"""Tests for stack inference and manifest export."""

from __future__ import annotations

import json

import pytest
import yaml

from upg.engine.assembler import ProjectAssembler
from upg.enrichment import export_manifest, infer_stack
from upg.enrichment.engine.stack_inferrer import collect_dependencies
from upg.models import EnrichmentFlags
from upg.strategies import ALL_STRATEGIES


@pytest.fixture
def express_files() -> dict[str, str]:
    package = {
        "name": "swift-api",
        "dependencies": {"express": "^4.19.2", "@prisma/client": "^5.0.0", "pg": "^8.11.0"},
        "devDependencies": {"typescript": "^5.4.0", "tsup": "^8.0.0", "vitest": "^1.6.0"},
    }
    return {
        "package.json": json.dumps(package),
        "src/index.ts": "import express from 'express';\n",
        "Dockerfile": "FROM node:20\nEXPOSE 3000\n",
        ".github/workflows/ci.yml": "name: CI\n",
    }


@pytest.fixture
def click_files() -> dict[str, str]:
    return {
        "pyproject.toml": '[project]\nname = "kit"\ndependencies = ["click>=8.1"]\n',
        "kit/cli.py": "import click\n",
    }


# ---------------------------------------------------------------------------
# Dependency collection
# ---------------------------------------------------------------------------

class TestCollectDependencies:
    def test_npm(self, express_files):
        deps = collect_dependencies(express_files)
        assert {"express", "@prisma/client", "pg", "typescript", "vitest"} <= deps

    def test_lower_cased(self):
        assert collect_dependencies({"requirements.txt": "Flask==3.0\n# comment\n"}) == {"flask"}

    def test_gomod(self):
        gomod = "module x\n\nrequire (\n\tgithub.com/spf13/cobra v1.8.0\n)\n"
        assert collect_dependencies({"go.mod": gomod}) == {"github.com/spf13/cobra"}

    def test_cargo(self):
        cargo = '[package]\nname = "x"\n\n[dependencies]\nclap = "4.5"\nserde = "1"\n'
        assert collect_dependencies({"Cargo.toml": cargo}) == {"clap", "serde"}

    def test_malformed_inputs(self):
        assert collect_dependencies({"package.json": "{", "pyproject.toml": "[project"}) == set()


# ---------------------------------------------------------------------------
# Inference
# ---------------------------------------------------------------------------

class TestInferStack:
    def test_express_backend(self, express_files):
        inferred = infer_stack(express_files)
        stack = inferred.stack
        assert stack.language == "typescript"
        assert stack.framework == "express"
        assert stack.archetype == "backend"
        assert stack.database == "postgres"
        assert stack.orm == "prisma"
        assert stack.packaging == "docker"
        assert stack.cicd == "github-actions"
        assert stack.build_tool == "tsup"
        assert stack.testing == "vitest"
        assert inferred.confidence["language"] == 0.9

    def test_python_click(self, click_files):
        stack = infer_stack(click_files).stack
        assert stack.language == "python"
        assert stack.framework == "click"
        assert stack.archetype == "cli"
        assert stack.database == "none"
        assert stack.testing == "pytest"

    def test_argparse_from_source(self):
        files = {"pyproject.toml": '[project]\nname = "x"\n', "x/cli.py": "import argparse\n"}
        assert infer_stack(files).stack.framework == "argparse"

    def test_empty_falls_back(self):
        inferred = infer_stack({})
        assert inferred.stack.language == "typescript"
        assert inferred.stack.archetype == "library"
        assert inferred.stack.framework == "none"
        assert inferred.confidence["language"] == 0.1

    def test_confidence_in_range(self, express_files):
        for value in infer_stack(express_files).confidence.values():
            assert 0.0 <= value <= 1.0

    @pytest.mark.asyncio
    async def test_generated_project_round_trip(self):
        project = await ProjectAssembler(
            42,
            {"archetype": "cli", "language": "python", "framework": "click", "packaging": "docker"},
            strategies=ALL_STRATEGIES,
        ).generate()
        stack = infer_stack(project.files).stack
        assert stack.language == "python"
        assert stack.framework == "click"
        assert stack.archetype == "cli"
        assert stack.packaging == "docker"


# ---------------------------------------------------------------------------
# Manifest export
# ---------------------------------------------------------------------------

class TestExportManifest:
    def test_defaults(self, express_files):
        manifest = export_manifest(express_files)
        assert manifest.api_version == "upg/v1"
        assert manifest.metadata.name == "exported-project"
        assert manifest.metadata.version == "1.0.0"
        assert manifest.metadata.tags == ["backend", "typescript", "express", "postgres"]
        assert manifest.metadata.description == "Generated backend project using typescript + express"

    def test_prompt_and_action(self, express_files):
        manifest = export_manifest(express_files, name="swift-api")
        assert manifest.prompts[0].id == "project_name"
        assert manifest.prompts[0].default == "swift-api"
        assert manifest.actions[0].dest == "{{ project_name }}"

    def test_to_dict_uses_alias(self, express_files):
        data = export_manifest(express_files).to_dict()
        assert data["apiVersion"] == "upg/v1"
        assert "api_version" not in data
        assert "enrichment" not in data
        assert list(data)[0] == "apiVersion"

    def test_enrichment_flags_included(self, express_files):
        flags = EnrichmentFlags.for_depth("full")
        data = export_manifest(express_files, enrichment_flags=flags).to_dict()
        assert data["enrichment"]["depth"] == "full"
        assert data["enrichment"]["enabled"] is True

    def test_yaml(self, click_files):
        text = export_manifest(click_files, name="kit", version="2.0.0").to_yaml()
        assert text.startswith("apiVersion: upg/v1\n")
        loaded = yaml.safe_load(text)
        assert loaded["metadata"]["name"] == "kit"
        assert loaded["metadata"]["version"] == "2.0.0"
        assert loaded["metadata"]["tags"] == ["cli", "python", "click"]
        assert loaded["actions"][0]["dest"] == "{{ project_name }}"
