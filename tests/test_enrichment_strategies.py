"""Tests for the bundled enrichment strategies, one project at a time."""

from __future__ import annotations

import logging

import pytest
import yaml

from upg.engine.rng import SeededRNG
from upg.enrichment import ALL_ENRICHMENT_STRATEGIES, ProjectEnricher
from upg.enrichment.strategies import (
    ApiRoutesStrategy,
    CliCommandsStrategy,
    DockerComposeStrategy,
    DockerProductionStrategy,
    EnvFilesStrategy,
    GitHubActionsStrategy,
    GitLabCIStrategy,
    IntegrationTestsStrategy,
    LintingStrategy,
    MiddlewareStrategy,
    ReadmeEnrichStrategy,
    ReleaseStrategy,
    TestConfigStrategy,
    UnitTestsStrategy,
    WebComponentsStrategy,
)
from upg.enrichment.strategies.docs import render_file_tree
from upg.enrichment.strategies.logic import MODEL_NAMES, config_file_name
from upg.enrichment.strategies.testing import DEFAULT_ENDPOINT, route_endpoint
from upg.models import EnrichmentFlags, GeneratedProject, GenerationMetadata, TechStack

PYPROJECT = '[project]\nname = "demo-api"\ndependencies = ["fastapi>=0.110"]\n'

NODE = {"language": "typescript", "runtime": "node", "orm": "prisma", "build_tool": "tsup", "testing": "vitest"}
WEB = {**NODE, "archetype": "web", "database": "none", "orm": "none"}


def _stack(**overrides) -> TechStack:
    values = {
        "archetype": "backend",
        "language": "python",
        "runtime": "native",
        "framework": "fastapi",
        "database": "postgres",
        "orm": "sqlalchemy",
        "transport": "rest",
        "packaging": "docker",
        "cicd": "github-actions",
        "build_tool": "make",
        "styling": "none",
        "testing": "pytest",
    }
    values.update(overrides)
    return TechStack(**values)


def _project(files: dict[str, str], **stack) -> GeneratedProject:
    return GeneratedProject(
        id="test-project",
        seed=1,
        name="demo-api",
        stack=_stack(**stack),
        files=files,
        metadata=GenerationMetadata(generated_at="2024-01-01T00:00:00+00:00"),
    )


async def _enrich(project, *strategies, depth="standard", **overrides):
    flags = EnrichmentFlags.for_depth(depth, **overrides)
    return await ProjectEnricher(project, SeededRNG(1), flags=flags, strategies=strategies).enrich()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_unique_ids(self):
        ids = [s.id for s in ALL_ENRICHMENT_STRATEGIES]
        assert len(ids) == len(set(ids)) == 15

    def test_readme_runs_last(self):
        last = max(ALL_ENRICHMENT_STRATEGIES, key=lambda s: s.priority)
        assert last.id == "enrich-readme"


# ---------------------------------------------------------------------------
# Environment files
# ---------------------------------------------------------------------------

class TestEnvFiles:
    @pytest.mark.asyncio
    async def test_writes_env_example(self):
        project = _project({"pyproject.toml": PYPROJECT, "Dockerfile": "EXPOSE 8000\n"})
        enriched = await _enrich(project, EnvFilesStrategy())
        env = enriched.files[".env.example"]
        assert "PORT=8000" in env
        assert "DATABASE_URL=postgresql://" in env
        assert "JWT_SECRET=" in env

    @pytest.mark.asyncio
    async def test_keeps_existing_env_example(self):
        project = _project({".env.example": "A=1\n"})
        enriched = await _enrich(project, EnvFilesStrategy())
        assert enriched.files[".env.example"] == "A=1\n"

    @pytest.mark.asyncio
    async def test_appends_to_gitignore(self):
        project = _project({".gitignore": "node_modules/\n"})
        enriched = await _enrich(project, EnvFilesStrategy())
        assert ".env\n" in enriched.files[".gitignore"]
        assert enriched.files[".gitignore"].startswith("node_modules/\n")
        assert ".gitignore" in enriched.enrichment.files_modified

    @pytest.mark.asyncio
    async def test_gitignore_with_env_untouched(self):
        project = _project({".gitignore": ".env\n"})
        enriched = await _enrich(project, EnvFilesStrategy())
        assert enriched.files[".gitignore"] == ".env\n"

    @pytest.mark.asyncio
    async def test_skips_dbless_cli(self):
        project = _project({}, archetype="cli", framework="click", database="none", orm="none")
        enriched = await _enrich(project, EnvFilesStrategy())
        assert ".env.example" not in enriched.files


# ---------------------------------------------------------------------------
# Linting
# ---------------------------------------------------------------------------

class TestLinting:
    @pytest.mark.asyncio
    async def test_python_gets_ruff(self):
        enriched = await _enrich(_project({"pyproject.toml": PYPROJECT}), LintingStrategy())
        assert "ruff.toml" in enriched.files
        assert ".editorconfig" in enriched.files

    @pytest.mark.asyncio
    async def test_python_with_tool_ruff(self):
        files = {"pyproject.toml": PYPROJECT + "\n[tool.ruff]\nline-length = 100\n"}
        enriched = await _enrich(_project(files), LintingStrategy())
        assert "ruff.toml" not in enriched.files

    @pytest.mark.asyncio
    async def test_typescript(self):
        project = _project({}, language="typescript", runtime="node", framework="express", orm="prisma",
                           build_tool="tsup", testing="vitest")
        enriched = await _enrich(project, LintingStrategy())
        assert ".prettierrc" in enriched.files
        assert "eslint.config.mjs" in enriched.files

    @pytest.mark.asyncio
    async def test_existing_eslint_respected(self):
        project = _project({"eslint.config.js": "export default [];\n"}, language="javascript", runtime="node",
                           framework="express", orm="prisma", build_tool="tsup", testing="vitest")
        enriched = await _enrich(project, LintingStrategy())
        assert "eslint.config.mjs" not in enriched.files

    @pytest.mark.asyncio
    async def test_go_and_rust(self):
        go = await _enrich(_project({}, language="go", framework="gin", orm="gorm", testing="go-test"),
                           LintingStrategy())
        rust = await _enrich(_project({}, language="rust", framework="axum", orm="diesel", build_tool="cargo",
                                      testing="rust-test"), LintingStrategy())
        assert ".golangci.yml" in go.files
        assert "clippy.toml" in rust.files

    @pytest.mark.asyncio
    async def test_disabled_by_flag(self):
        enriched = await _enrich(_project({}), LintingStrategy(), linting=False)
        assert enriched.enrichment.strategies_applied == []


# ---------------------------------------------------------------------------
# CI
# ---------------------------------------------------------------------------

class TestGitHubActions:
    @pytest.mark.asyncio
    async def test_standard_workflow(self):
        enriched = await _enrich(_project({"pyproject.toml": PYPROJECT}), GitHubActionsStrategy())
        workflow = enriched.files[".github/workflows/ci.yml"]
        assert "concurrency:" in workflow
        assert "${{ github.workflow }}" in workflow
        assert "matrix" not in workflow
        assert "run: ruff check ." in workflow
        assert "run: pytest" in workflow

    @pytest.mark.asyncio
    async def test_full_depth_adds_matrix_and_docker_job(self):
        files = {"pyproject.toml": PYPROJECT, "Dockerfile": "FROM python:3.12\nEXPOSE 8000\n"}
        enriched = await _enrich(_project(files), GitHubActionsStrategy(), depth="full")
        workflow = enriched.files[".github/workflows/ci.yml"]
        assert "python-version: ['3.11', '3.12', '3.13']" in workflow
        assert "${{ matrix.python-version }}" in workflow
        assert "docker run -d -p 8000:8000" in workflow

    @pytest.mark.asyncio
    async def test_workflow_is_valid_yaml(self):
        files = {"pyproject.toml": PYPROJECT, "Dockerfile": "EXPOSE 8000\n"}
        enriched = await _enrich(_project(files), GitHubActionsStrategy(), depth="full")
        parsed = yaml.safe_load(enriched.files[".github/workflows/ci.yml"])
        assert set(parsed["jobs"]) == {"build", "docker"}
        assert parsed["jobs"]["docker"]["needs"] == "build"

    @pytest.mark.asyncio
    async def test_node_uses_npm_scripts(self):
        package = '{"name": "demo", "scripts": {"test": "vitest run", "build": "tsup"}}'
        project = _project({"package.json": package}, language="typescript", runtime="node", framework="express",
                           orm="prisma", build_tool="tsup", testing="vitest")
        enriched = await _enrich(project, GitHubActionsStrategy())
        workflow = enriched.files[".github/workflows/ci.yml"]
        assert "run: npm ci" in workflow
        assert "run: npm test" in workflow
        assert "run: npm run build" in workflow
        assert "npm run lint" not in workflow

    @pytest.mark.asyncio
    async def test_only_for_github(self):
        enriched = await _enrich(_project({}, cicd="gitlab-ci"), GitHubActionsStrategy())
        assert enriched.enrichment.strategies_applied == []


class TestGitLabCI:
    @pytest.mark.asyncio
    async def test_pipeline(self):
        files = {"pyproject.toml": PYPROJECT, "Dockerfile": "EXPOSE 8000\n"}
        enriched = await _enrich(_project(files, cicd="gitlab-ci"), GitLabCIStrategy())
        parsed = yaml.safe_load(enriched.files[".gitlab-ci.yml"])
        assert parsed["stages"] == ["lint", "test", "build", "docker"]
        assert parsed["default"]["image"] == "python:3.12"
        assert parsed["test"]["script"] == ["pytest"]

    @pytest.mark.asyncio
    async def test_no_docker_stage_without_dockerfile(self):
        enriched = await _enrich(_project({}, cicd="gitlab-ci"), GitLabCIStrategy())
        parsed = yaml.safe_load(enriched.files[".gitlab-ci.yml"])
        assert "docker" not in parsed
        assert parsed["test"]["script"] == ["make test"]


class TestRelease:
    @pytest.mark.asyncio
    async def test_release_workflow(self):
        enriched = await _enrich(_project({"Dockerfile": "EXPOSE 8000\n"}), ReleaseStrategy())
        release = enriched.files[".github/workflows/release.yml"]
        assert "tags:" in release
        assert "python -m build" in release
        assert "${{ github.ref_name }}" in release

    @pytest.mark.asyncio
    async def test_minimal_depth_skips_release(self):
        enriched = await _enrich(_project({}), ReleaseStrategy(), depth="minimal")
        assert ".github/workflows/release.yml" not in enriched.files


# ---------------------------------------------------------------------------
# Test configuration
# ---------------------------------------------------------------------------

class TestTestConfig:
    @pytest.mark.asyncio
    async def test_appends_pytest_section(self):
        enriched = await _enrich(_project({"pyproject.toml": PYPROJECT}), TestConfigStrategy())
        assert "[tool.pytest.ini_options]" in enriched.files["pyproject.toml"]
        assert enriched.files["pyproject.toml"].startswith(PYPROJECT)
        assert enriched.enrichment.files_modified == ["pyproject.toml"]

    @pytest.mark.asyncio
    async def test_existing_section_untouched(self):
        files = {"pyproject.toml": PYPROJECT + '\n[tool.pytest.ini_options]\ntestpaths = ["tests"]\n'}
        enriched = await _enrich(_project(files), TestConfigStrategy())
        assert enriched.enrichment.files_modified == []

    @pytest.mark.asyncio
    async def test_pytest_ini_without_pyproject(self):
        enriched = await _enrich(_project({}), TestConfigStrategy())
        assert enriched.files["pytest.ini"].startswith("[pytest]")

    @pytest.mark.asyncio
    async def test_pytest_ini_respected(self):
        files = {"pytest.ini": "[pytest]\n", "pyproject.toml": PYPROJECT}
        enriched = await _enrich(_project(files), TestConfigStrategy())
        assert enriched.files == files

    @pytest.mark.asyncio
    async def test_vitest_config(self):
        project = _project({}, language="typescript", runtime="node", framework="express", orm="prisma",
                           build_tool="tsup", testing="vitest")
        enriched = await _enrich(project, TestConfigStrategy())
        assert "include: ['src/**/*.test.ts', 'tests/**/*.test.ts']" in enriched.files["vitest.config.ts"]

    @pytest.mark.asyncio
    async def test_unsupported_runner(self):
        project = _project({}, language="go", framework="gin", orm="gorm", testing="go-test")
        enriched = await _enrich(project, TestConfigStrategy())
        assert enriched.enrichment.strategies_applied == []


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

class TestDocker:
    @pytest.mark.asyncio
    async def test_production_dockerfile(self):
        project = _project({"Dockerfile": "FROM python:3.12\nEXPOSE 8000\n"})
        enriched = await _enrich(project, DockerProductionStrategy())
        dockerfile = enriched.files["Dockerfile"]
        assert "AS builder" in dockerfile
        assert "USER app" in dockerfile
        assert '"demo_api.main:app"' in dockerfile
        assert "EXPOSE 8000" in dockerfile
        assert "Dockerfile" in enriched.enrichment.files_modified
        assert ".dockerignore" in enriched.enrichment.files_added

    @pytest.mark.asyncio
    async def test_existing_dockerignore_kept(self):
        project = _project({"Dockerfile": "EXPOSE 8000\n", ".dockerignore": ".git\n"})
        enriched = await _enrich(project, DockerProductionStrategy())
        assert enriched.files[".dockerignore"] == ".git\n"

    @pytest.mark.asyncio
    async def test_unsupported_language_skipped(self):
        project = _project({"Dockerfile": "EXPOSE 8080\n"}, language="java", runtime="jvm", framework="spring-boot",
                           orm="none", build_tool="gradle", testing="junit")
        enriched = await _enrich(project, DockerProductionStrategy())
        assert enriched.enrichment.strategies_applied == []

    @pytest.mark.asyncio
    async def test_compose_with_database(self):
        project = _project({"Dockerfile": "EXPOSE 8000\n"})
        enriched = await _enrich(project, DockerComposeStrategy())
        compose = yaml.safe_load(enriched.files["docker-compose.yml"])
        assert compose["services"]["app"]["ports"] == ["8000:8000"]
        assert compose["services"]["app"]["depends_on"]["db"]["condition"] == "service_healthy"
        assert compose["services"]["db"]["image"] == "postgres:16-alpine"
        assert "healthcheck" in compose["services"]["db"]
        assert "db-data" in compose["volumes"]

    @pytest.mark.asyncio
    async def test_compose_without_database(self):
        project = _project({}, database="none", orm="none")
        enriched = await _enrich(project, DockerComposeStrategy())
        compose = yaml.safe_load(enriched.files["docker-compose.yml"])
        assert list(compose["services"]) == ["app"]

    @pytest.mark.asyncio
    async def test_no_docker_packaging(self):
        project = _project({}, packaging="none")
        enriched = await _enrich(project, DockerProductionStrategy(), DockerComposeStrategy())
        assert enriched.enrichment.strategies_applied == []


# ---------------------------------------------------------------------------
# README
# ---------------------------------------------------------------------------

class TestReadme:
    def test_file_tree_directories_first(self):
        tree = render_file_tree(["README.md", "src/main.py", "src/util/io.py", "LICENSE"])
        assert tree.splitlines() == ["src/", "  util/", "    io.py", "  main.py", "LICENSE", "README.md"]

    @pytest.mark.asyncio
    async def test_readme_sections(self):
        files = {"pyproject.toml": PYPROJECT, "Dockerfile": "EXPOSE 8000\n", "docker-compose.yml": "services: {}\n"}
        enriched = await _enrich(_project(files), ReadmeEnrichStrategy())
        readme = enriched.files["README.md"]
        assert readme.startswith("# demo-api\n")
        assert "## Tech Stack" in readme
        assert "| Framework | FastAPI |" in readme
        assert "| Database | PostgreSQL |" in readme
        assert "## Project Structure" in readme
        assert "http://localhost:8000" in readme
        assert "docker compose up -d" in readme
        assert "## Testing" in readme

    @pytest.mark.asyncio
    async def test_minimal_readme_omits_structure(self):
        enriched = await _enrich(_project({"pyproject.toml": PYPROJECT}), ReadmeEnrichStrategy(), depth="minimal")
        assert "## Project Structure" not in enriched.files["README.md"]
        assert "## Tech Stack" in enriched.files["README.md"]


# ---------------------------------------------------------------------------
# Logic fill
# ---------------------------------------------------------------------------

def _added(enriched, prefix: str) -> list[str]:
    return [path for path in enriched.enrichment.files_added if path.startswith(prefix)]


class TestCliCommands:
    def test_config_file_name(self):
        assert config_file_name("demo-api") == ".demoapirc.json"

    @pytest.mark.asyncio
    async def test_python_commands_in_package(self):
        project = _project({}, archetype="cli", framework="click", database="none", orm="none")
        enriched = await _enrich(project, CliCommandsStrategy())
        commands = enriched.files["demo_api/commands.py"]
        assert 'CONFIG_FILE = ".demoapirc.json"' in commands
        assert "def init_command(force: bool = False) -> None:" in commands
        assert "{item['name']:<20}" in commands

    @pytest.mark.asyncio
    async def test_typescript_commands(self):
        project = _project({}, archetype="cli", framework="commander", database="none", **{**NODE, "orm": "none"})
        enriched = await _enrich(project, CliCommandsStrategy())
        commands = enriched.files["src/commands/index.ts"]
        assert "const CONFIG_FILE = '.demoapirc.json';" in commands
        assert "export function listCommand(options: { format?: 'text' | 'json' }): void {" in commands
        assert "console.log(`Created ${CONFIG_FILE}`);" in commands

    @pytest.mark.asyncio
    async def test_only_cli_projects(self):
        enriched = await _enrich(_project({}), CliCommandsStrategy())
        assert enriched.enrichment.strategies_applied == []

    @pytest.mark.asyncio
    async def test_minimal_depth_has_no_logic_fill(self):
        project = _project({}, archetype="cli", framework="click", database="none", orm="none")
        enriched = await _enrich(project, CliCommandsStrategy(), depth="minimal")
        assert enriched.enrichment.strategies_applied == []


class TestApiRoutes:
    @pytest.mark.asyncio
    async def test_fastapi_router(self):
        enriched = await _enrich(_project({}), ApiRoutesStrategy())
        [path] = [p for p in _added(enriched, "demo_api/routes/") if not p.endswith("__init__.py")]
        lower = path.removeprefix("demo_api/routes/").removesuffix("s.py")
        assert lower.capitalize() in MODEL_NAMES
        routes = enriched.files[path]
        assert f'router = APIRouter(prefix="/{lower}s", tags=["{lower}s"])' in routes
        assert f'@router.get("/{{{lower}_id}}")' in routes
        assert enriched.files["demo_api/routes/__init__.py"] == ""

    @pytest.mark.asyncio
    async def test_model_name_is_seeded(self):
        first = await _enrich(_project({}), ApiRoutesStrategy())
        second = await _enrich(_project({}), ApiRoutesStrategy())
        assert first.files == second.files

    @pytest.mark.asyncio
    async def test_flask_blueprint(self):
        enriched = await _enrich(_project({}, framework="flask"), ApiRoutesStrategy())
        [path] = [p for p in _added(enriched, "demo_api/routes/") if not p.endswith("__init__.py")]
        assert "Blueprint(" in enriched.files[path]
        assert "return jsonify({\"data\": item}), 201" in enriched.files[path]

    @pytest.mark.asyncio
    async def test_express_and_nest(self):
        express = await _enrich(_project({}, framework="express", **NODE), ApiRoutesStrategy())
        nest = await _enrich(_project({}, framework="nestjs", **NODE), ApiRoutesStrategy())
        [express_path] = _added(express, "src/routes/")
        [nest_path] = _added(nest, "src/routes/")
        assert "const router = Router();" in express.files[express_path]
        assert "res.status(201).json({ data: item });" in express.files[express_path]
        assert "@Controller(" in nest.files[nest_path]

    @pytest.mark.asyncio
    async def test_go_handlers_per_framework(self):
        gin = await _enrich(_project({}, language="go", framework="gin", orm="gorm", testing="go-test"),
                            ApiRoutesStrategy())
        echo = await _enrich(_project({}, language="go", framework="echo", orm="gorm", testing="go-test"),
                             ApiRoutesStrategy())
        [gin_path] = _added(gin, "internal/handlers/")
        [echo_path] = _added(echo, "internal/handlers/")
        assert '"github.com/gin-gonic/gin"' in gin.files[gin_path]
        assert "c *gin.Context" in gin.files[gin_path]
        assert '"github.com/labstack/echo/v4"' in echo.files[echo_path]
        assert "map[string]interface{}{" in echo.files[echo_path]

    @pytest.mark.asyncio
    async def test_rust_axum_only(self):
        rust = {"language": "rust", "orm": "diesel", "build_tool": "cargo", "testing": "rust-test"}
        axum = await _enrich(_project({}, framework="axum", **rust), ApiRoutesStrategy())
        actix = await _enrich(_project({}, framework="actix", **rust), ApiRoutesStrategy())
        [path] = _added(axum, "src/routes/")
        assert "Router::new()" in axum.files[path]
        assert actix.enrichment.files_added == []

    @pytest.mark.asyncio
    async def test_not_for_cli(self):
        project = _project({}, archetype="cli", framework="click", database="none", orm="none")
        enriched = await _enrich(project, ApiRoutesStrategy())
        assert enriched.enrichment.strategies_applied == []


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_python(self):
        enriched = await _enrich(_project({}), MiddlewareStrategy())
        assert "def request_logger(func):" in enriched.files["demo_api/middleware.py"]

    @pytest.mark.asyncio
    async def test_go_and_typescript(self):
        go = await _enrich(_project({}, language="go", framework="gin", orm="gorm", testing="go-test"),
                           MiddlewareStrategy())
        ts = await _enrich(_project({}, framework="express", **NODE), MiddlewareStrategy())
        assert "func CORS(next http.Handler) http.Handler {" in go.files["internal/middleware/middleware.go"]
        assert "export function notFoundHandler" in ts.files["src/middleware/index.ts"]

    @pytest.mark.asyncio
    async def test_disabled_by_flag(self):
        enriched = await _enrich(_project({}), MiddlewareStrategy(), fill_logic=False)
        assert enriched.enrichment.strategies_applied == []


class TestWebComponents:
    @pytest.mark.asyncio
    async def test_react_family(self):
        enriched = await _enrich(_project({}, framework="nextjs", **WEB), WebComponentsStrategy())
        assert sorted(enriched.enrichment.files_added) == [
            "src/components/Footer.tsx",
            "src/components/Header.tsx",
            "src/components/Layout.tsx",
        ]
        header = enriched.files["src/components/Header.tsx"]
        assert "export function Header({ title = 'demo-api' }: HeaderProps) {" in header
        assert "<header style={{ padding: '1rem 2rem', borderBottom: '1px solid #e2e8f0' }}>" in header
        assert "<main style={{ flex: 1, padding: '2rem' }}>{children}</main>" in enriched.files[
            "src/components/Layout.tsx"
        ]

    @pytest.mark.asyncio
    async def test_vue_and_svelte(self):
        vue = await _enrich(_project({}, framework="vue", **WEB), WebComponentsStrategy())
        svelte = await _enrich(_project({}, framework="sveltekit", **WEB), WebComponentsStrategy())
        assert "{{ title ?? 'demo-api' }}" in vue.files["src/components/AppHeader.vue"]
        assert "<p>&copy; {{ year }} demo-api. All rights reserved.</p>" in vue.files["src/components/AppFooter.vue"]
        assert "export let title = 'demo-api';" in svelte.files["src/lib/components/Header.svelte"]
        assert "{new Date().getFullYear()}" in svelte.files["src/lib/components/Footer.svelte"]

    @pytest.mark.asyncio
    async def test_unknown_framework_writes_nothing(self):
        enriched = await _enrich(_project({}, framework="angular", **WEB), WebComponentsStrategy())
        assert enriched.enrichment.files_added == []

    @pytest.mark.asyncio
    async def test_only_web(self):
        enriched = await _enrich(_project({}), WebComponentsStrategy())
        assert enriched.enrichment.strategies_applied == []


# ---------------------------------------------------------------------------
# Generated test suites
# ---------------------------------------------------------------------------

class TestUnitTests:
    @pytest.mark.asyncio
    async def test_python_suite(self):
        enriched = await _enrich(_project({}), UnitTestsStrategy())
        suite = enriched.files["tests/test_app.py"]
        assert suite.startswith('"""Unit tests for demo-api."""')
        assert "class TestDataValidation:" in suite
        assert 'merged = {**{"port": 3000, "host": "localhost"}, **{"port": 8080}}' in suite

    @pytest.mark.asyncio
    async def test_existing_suite_kept(self, caplog):
        project = _project({"tests/test_app.py": "def test_app():\n    pass\n"}, framework="flask")
        with caplog.at_level(logging.DEBUG, logger="upg.enrichment.strategies.testing"):
            enriched = await _enrich(project, UnitTestsStrategy())
        assert enriched.files == project.files
        assert "Keeping existing tests/test_app.py" in caplog.text

    @pytest.mark.asyncio
    async def test_vitest_suites(self):
        service = await _enrich(_project({}, framework="express", **NODE), UnitTestsStrategy())
        web = await _enrich(_project({}, framework="react", **WEB), UnitTestsStrategy())
        assert "describe('ID Generation'" in service.files["src/__tests__/app.test.ts"]
        assert "describe('Async Operations'" in web.files["src/__tests__/app.test.ts"]

    @pytest.mark.asyncio
    async def test_go_and_rust(self):
        go = await _enrich(_project({}, language="go", framework="gin", orm="gorm", testing="go-test"),
                           UnitTestsStrategy())
        rust = await _enrich(_project({}, language="rust", framework="axum", orm="diesel", build_tool="cargo",
                                      testing="rust-test"), UnitTestsStrategy())
        assert "func TestDataValidation(t *testing.T) {" in go.files["main_test.go"]
        assert 'format!("id-{}", i)' in rust.files["tests/unit_test.rs"]

    @pytest.mark.asyncio
    async def test_disabled_by_flag(self):
        enriched = await _enrich(_project({}), UnitTestsStrategy(), tests=False)
        assert enriched.enrichment.strategies_applied == []


class TestIntegrationTests:
    def test_route_endpoint(self):
        assert route_endpoint(["pkg/routes/__init__.py", "pkg/routes/users.py"]) == "/users"
        assert route_endpoint(["src/routes/orders.ts"]) == "/orders"
        assert route_endpoint(["src/index.ts"]) == DEFAULT_ENDPOINT

    @pytest.mark.asyncio
    async def test_python_uses_exposed_port(self):
        enriched = await _enrich(_project({"Dockerfile": "EXPOSE 9000\n"}), IntegrationTestsStrategy())
        suite = enriched.files["tests/test_integration.py"]
        assert 'BASE_URL = os.environ.get("BASE_URL", "http://localhost:9000")' in suite
        assert f'requests.get(f"{{BASE_URL}}{DEFAULT_ENDPOINT}", timeout=5)' in suite

    @pytest.mark.asyncio
    async def test_endpoint_follows_generated_routes(self):
        enriched = await _enrich(_project({}), ApiRoutesStrategy(), IntegrationTestsStrategy())
        [routes] = [p for p in _added(enriched, "demo_api/routes/") if not p.endswith("__init__.py")]
        endpoint = "/" + routes.removeprefix("demo_api/routes/").removesuffix(".py")
        suite = enriched.files["tests/test_integration.py"]
        assert "http://localhost:8000" in suite
        assert f'requests.get(f"{{BASE_URL}}{endpoint}/non-existent-id", timeout=5)' in suite

    @pytest.mark.asyncio
    async def test_typescript_default_port(self):
        enriched = await _enrich(_project({}, framework="express", **NODE), IntegrationTestsStrategy())
        suite = enriched.files["tests/integration/api.test.ts"]
        assert "process.env.BASE_URL ?? 'http://localhost:3000'" in suite
        assert "fetch(`${BASE_URL}/health`)" in suite

    @pytest.mark.asyncio
    async def test_backend_only(self):
        project = _project({}, archetype="cli", framework="click", database="none", orm="none")
        enriched = await _enrich(project, IntegrationTestsStrategy())
        assert enriched.enrichment.strategies_applied == []
