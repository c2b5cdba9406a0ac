"""Tests for ProjectIntrospector: file queries, globbing and manifest parsing."""

from __future__ import annotations

import json

import pytest

from upg.enrichment.engine.introspector import ProjectIntrospector, glob_to_regex
from upg.models import TechStack


def _stack(**overrides) -> TechStack:
    values = {
        "archetype": "backend",
        "language": "typescript",
        "runtime": "node",
        "framework": "express",
        "database": "postgres",
        "orm": "prisma",
        "transport": "rest",
        "packaging": "docker",
        "cicd": "github-actions",
        "build_tool": "tsup",
        "styling": "none",
        "testing": "vitest",
    }
    values.update(overrides)
    return TechStack(**values)


PYTHON_STACK = _stack(
    language="python", runtime="native", framework="fastapi", orm="sqlalchemy",
    build_tool="make", testing="pytest",
)

PACKAGE_JSON = json.dumps({
    "name": "swift-api",
    "dependencies": {"express": "^4.19.2"},
    "devDependencies": {"vitest": "^1.6.0"},
    "scripts": {"test": "vitest run", "build": "tsup src/index.ts"},
})


@pytest.fixture
def node_files() -> dict[str, str]:
    return {
        "package.json": PACKAGE_JSON,
        "src/index.ts": "console.log('hi');\n",
        "src/routes/users.ts": "",
        "src/routes/users.test.ts": "",
        "tests/app.test.ts": "",
        "Dockerfile": "FROM node:20\nEXPOSE 3000\n  expose 9999\nEXPOSE 9229\n",
    }


# ---------------------------------------------------------------------------
# File queries
# ---------------------------------------------------------------------------

class TestFileQueries:
    def test_has_file_and_content(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        assert intro.has_file("src/index.ts")
        assert not intro.has_file("src/missing.ts")
        assert intro.get_content("src/missing.ts") is None
        assert intro.get_content("src/index.ts") == "console.log('hi');\n"

    def test_all_paths_in_order(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        assert intro.get_all_paths() == list(node_files)

    def test_read_only_view(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        with pytest.raises(TypeError):
            intro._files["new.txt"] = "x"

    def test_sees_live_mapping(self):
        files: dict[str, str] = {}
        intro = ProjectIntrospector(files, _stack())
        files["late.txt"] = "x"
        assert intro.has_file("late.txt")


class TestParseJson:
    def test_valid(self, node_files):
        assert ProjectIntrospector(node_files, _stack()).parse_json("package.json")["name"] == "swift-api"

    @pytest.mark.parametrize("content", ["", "{not json", "[1, 2"])
    def test_bad_content_is_none(self, content):
        assert ProjectIntrospector({"x.json": content}, _stack()).parse_json("x.json") is None

    def test_missing_is_none(self):
        assert ProjectIntrospector({}, _stack()).parse_json("x.json") is None

    def test_deeply_nested_is_none(self):
        intro = ProjectIntrospector({"package.json": "[" * 100000}, _stack())
        assert intro.parse_json("package.json") is None
        assert intro.get_manifest().type == "npm"
        assert intro.get_manifest().dependencies == {}


# ---------------------------------------------------------------------------
# Globbing
# ---------------------------------------------------------------------------

class TestGlob:
    def test_single_star_stays_in_segment(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        assert intro.find_files("src/*.ts") == ["src/index.ts"]

    def test_double_star_crosses_segments(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        assert intro.find_files("**/*.test.ts") == ["src/routes/users.test.ts", "tests/app.test.ts"]

    def test_literal_dots(self):
        regex = glob_to_regex("*.ts")
        assert regex.match("index.ts")
        assert not regex.match("indexxts")
        assert not regex.match("src/index.ts")

    def test_no_match(self, node_files):
        assert ProjectIntrospector(node_files, _stack()).find_files("*.py") == []


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

class TestStructure:
    def test_entry_point(self, node_files):
        assert ProjectIntrospector(node_files, _stack()).get_entry_point() == "src/index.ts"

    def test_entry_point_missing(self):
        assert ProjectIntrospector({"README.md": ""}, _stack()).get_entry_point() is None

    def test_exposed_ports(self, node_files):
        # EXPOSE is matched case-sensitively at line start
        assert ProjectIntrospector(node_files, _stack()).get_exposed_ports() == [3000, 9229]

    def test_no_dockerfile_no_ports(self):
        assert ProjectIntrospector({}, _stack()).get_exposed_ports() == []

    def test_commands_from_manifest(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        assert intro.get_test_command() == "vitest run"
        assert intro.get_build_command() == "tsup src/index.ts"


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

class TestManifest:
    def test_npm(self, node_files):
        manifest = ProjectIntrospector(node_files, _stack()).get_manifest()
        assert manifest.type == "npm"
        assert manifest.name == "swift-api"
        assert manifest.dependencies == {"express": "^4.19.2"}
        assert manifest.dev_dependencies == {"vitest": "^1.6.0"}

    def test_cached(self, node_files):
        intro = ProjectIntrospector(node_files, _stack())
        assert intro.get_manifest() is intro.get_manifest()

    def test_npm_wins_over_python(self, node_files):
        files = {**node_files, "requirements.txt": "flask\n"}
        assert ProjectIntrospector(files, _stack()).get_manifest().type == "npm"

    def test_malformed_package_json(self):
        manifest = ProjectIntrospector({"package.json": "{oops"}, _stack()).get_manifest()
        assert manifest.type == "npm"
        assert manifest.dependencies == {}

    def test_package_json_with_odd_field_types(self):
        content = json.dumps({"name": 7, "dependencies": ["express"], "scripts": {"test": "vitest"}})
        manifest = ProjectIntrospector({"package.json": content}, _stack()).get_manifest()
        assert manifest.name is None
        assert manifest.dependencies == {}
        assert manifest.scripts == {"test": "vitest"}

    def test_python_pyproject(self):
        pyproject = (
            '[project]\nname = "demo"\ndependencies = ["fastapi>=0.110", "uvicorn[standard]>=0.29"]\n'
            '[project.optional-dependencies]\ndev = ["pytest>=7.0"]\n'
        )
        manifest = ProjectIntrospector({"pyproject.toml": pyproject}, PYTHON_STACK).get_manifest()
        assert manifest.type == "python"
        assert manifest.name == "demo"
        assert set(manifest.dependencies) == {"fastapi", "uvicorn"}
        assert manifest.dev_dependencies == {"pytest": "pytest>=7.0"}
        assert manifest.scripts["test"] == "pytest"

    def test_python_requirements(self):
        files = {"requirements.txt": "# pinned\nflask==3.0.0\n-r base.txt\n\nrequests>=2\n"}
        manifest = ProjectIntrospector(files, PYTHON_STACK).get_manifest()
        assert manifest.dependencies == {"flask": "flask==3.0.0", "requests": "requests>=2"}

    def test_invalid_pyproject_tolerated(self):
        manifest = ProjectIntrospector({"pyproject.toml": "[project\n"}, PYTHON_STACK).get_manifest()
        assert manifest.type == "python"
        assert manifest.name is None

    def test_cargo(self):
        cargo = '[package]\nname = "quick-kit"\nversion = "0.1.0"\n\n[dependencies]\nclap = "4.5"\n'
        manifest = ProjectIntrospector({"Cargo.toml": cargo}, _stack(language="rust")).get_manifest()
        assert manifest.type == "cargo"
        assert manifest.name == "quick-kit"
        assert manifest.dependencies == {"clap": "4.5"}
        assert manifest.scripts["test"] == "cargo test"

    def test_gomod(self):
        gomod = "module github.com/acme/hub\n\ngo 1.22\n\nrequire (\n\tgithub.com/gin-gonic/gin v1.9.1\n)\n"
        manifest = ProjectIntrospector({"go.mod": gomod}, _stack(language="go")).get_manifest()
        assert manifest.type == "gomod"
        assert manifest.name == "github.com/acme/hub"
        assert manifest.dependencies == {"github.com/gin-gonic/gin": "v1.9.1"}

    def test_composer_scripts_joined(self):
        composer = json.dumps({"name": "acme/app", "scripts": {"test": ["phpunit", "phpstan"]}})
        manifest = ProjectIntrospector({"composer.json": composer}, _stack(language="php")).get_manifest()
        assert manifest.type == "composer"
        assert manifest.scripts["test"] == "phpunit && phpstan"

    def test_unknown(self):
        manifest = ProjectIntrospector({"README.md": "# hi"}, _stack()).get_manifest()
        assert manifest.type == "unknown"
        assert manifest.scripts == {}
