"""Python project strategies: click and argparse CLIs, FastAPI and Flask
services, and plain libraries."""

from __future__ import annotations

from upg.engine.strategy import GenerationContext, GenerationStrategy
from upg.models import EnrichmentFlags, TechStack
from upg.strategies.common import package_name, service_port

_PYPROJECT_TEMPLATE = """\
[build-system]
requires = ["setuptools>=68.0", "wheel"]
build-backend = "setuptools.build_meta"

[project]
name = "{project_name}"
version = "0.1.0"
description = "{description}"
readme = "README.md"
license = {{text = "MIT"}}
requires-python = ">=3.11"
dependencies = [
{dependencies}
]

[project.optional-dependencies]
dev = [
    "pytest>=7.0",
    "ruff>=0.4",
]
{scripts}
[tool.setuptools.packages.find]
include = ["{pkg}*"]

[tool.pytest.ini_options]
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"
"""

_SCRIPTS_TEMPLATE = """\

[project.scripts]
{project_name} = "{pkg}.cli:main"
"""

_MAKEFILE_TEMPLATE = """\
.PHONY: install test lint

install:
\tpip install -e ".[dev]"

test:
\tpytest

lint:
\truff check {pkg} tests
"""


def _pyproject(
    context: GenerationContext,
    description: str,
    dependencies: list[str],
    *,
    console_script: bool = False,
) -> str:
    pkg = package_name(context.project_name)
    deps = "\n".join(f'    "{dep}",' for dep in dependencies)
    scripts = _SCRIPTS_TEMPLATE.format(project_name=context.project_name, pkg=pkg) if console_script else ""
    return _PYPROJECT_TEMPLATE.format(
        project_name=context.project_name,
        description=description,
        dependencies=deps,
        scripts=scripts,
        pkg=pkg,
    )


def _database_dependencies(stack: TechStack) -> list[str]:
    deps: list[str] = []
    if stack.orm == "sqlalchemy":
        deps.append("sqlalchemy>=2.0")
    match stack.database:
        case "postgres":
            deps.append("psycopg[binary]>=3.1")
        case "mysql":
            deps.append("pymysql>=1.1")
        case "mongodb":
            deps.append("pymongo>=4.6")
        case "redis":
            deps.append("redis>=5.0")
    return deps


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

_CLICK_CLI_TEMPLATE = """\
\"\"\"Command-line interface for {project_name}.\"\"\"

import click

from {pkg} import __version__


@click.group()
@click.version_option(__version__)
def main() -> None:
    \"\"\"{project_name} command-line tool.\"\"\"


@main.command()
@click.argument("name", default="world")
@click.option("--shout", is_flag=True, help="Print in upper case.")
def greet(name: str, shout: bool) -> None:
    \"\"\"Greet NAME.\"\"\"
    message = f"Hello, {{name}}!"
    click.echo(message.upper() if shout else message)


if __name__ == "__main__":
    main()
"""

_CLICK_TEST_TEMPLATE = """\
from click.testing import CliRunner

from {pkg}.cli import main


def test_greet_default():
    result = CliRunner().invoke(main, ["greet"])
    assert result.exit_code == 0
    assert "Hello, world!" in result.output


def test_greet_shout():
    result = CliRunner().invoke(main, ["greet", "upg", "--shout"])
    assert result.exit_code == 0
    assert "HELLO, UPG!" in result.output
"""

_ARGPARSE_CLI_TEMPLATE = """\
\"\"\"Command-line interface for {project_name}.\"\"\"

import argparse
import sys

from {pkg} import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="{project_name}")
    parser.add_argument("--version", action="version", version=__version__)
    sub = parser.add_subparsers(dest="command", required=True)

    greet = sub.add_parser("greet", help="Print a greeting")
    greet.add_argument("name", nargs="?", default="world")
    greet.add_argument("--shout", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "greet":
        message = f"Hello, {{args.name}}!"
        print(message.upper() if args.shout else message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""

_ARGPARSE_TEST_TEMPLATE = """\
from {pkg}.cli import main


def test_greet_default(capsys):
    assert main(["greet"]) == 0
    assert "Hello, world!" in capsys.readouterr().out


def test_greet_shout(capsys):
    assert main(["greet", "upg", "--shout"]) == 0
    assert "HELLO, UPG!" in capsys.readouterr().out
"""


class _PythonCLIStrategy(GenerationStrategy):
    priority = 10
    framework: str = ""
    dependencies: tuple[str, ...] = ()
    cli_template: str = ""
    test_template: str = ""

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "python" and stack.framework == self.framework

    async def apply(self, context: GenerationContext) -> None:
        pkg = package_name(context.project_name)
        files = context.files
        files["pyproject.toml"] = _pyproject(
            context,
            f"{context.project_name} command-line tool",
            [*self.dependencies, *_database_dependencies(context.stack)],
            console_script=True,
        )
        files[f"{pkg}/__init__.py"] = f'"""{context.project_name}."""\n\n__version__ = "0.1.0"\n'
        files[f"{pkg}/__main__.py"] = f"from {pkg}.cli import main\n\nmain()\n"
        files[f"{pkg}/cli.py"] = self.cli_template.format(project_name=context.project_name, pkg=pkg)
        files["tests/__init__.py"] = ""
        files["tests/test_cli.py"] = self.test_template.format(pkg=pkg)
        files["Makefile"] = _MAKEFILE_TEMPLATE.format(pkg=pkg)


class ClickStrategy(_PythonCLIStrategy):
    id = "python-click"
    name = "Python Click CLI"
    framework = "click"
    dependencies = ("click>=8.1",)
    cli_template = _CLICK_CLI_TEMPLATE
    test_template = _CLICK_TEST_TEMPLATE


class ArgparseStrategy(_PythonCLIStrategy):
    id = "python-argparse"
    name = "Python argparse CLI"
    framework = "argparse"
    cli_template = _ARGPARSE_CLI_TEMPLATE
    test_template = _ARGPARSE_TEST_TEMPLATE


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------

_FASTAPI_MAIN_TEMPLATE = """\
\"\"\"{project_name} API.\"\"\"

from fastapi import FastAPI

from {pkg} import __version__

app = FastAPI(title="{project_name}", version=__version__)


@app.get("/health")
async def health() -> dict[str, str]:
    return {{"status": "ok"}}


@app.get("/items/{{item_id}}")
async def read_item(item_id: int) -> dict[str, int]:
    return {{"item_id": item_id}}
"""

_FASTAPI_TEST_TEMPLATE = """\
from fastapi.testclient import TestClient

from {pkg}.main import app

client = TestClient(app)


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {{"status": "ok"}}


def test_read_item():
    assert client.get("/items/7").json() == {{"item_id": 7}}
"""

_FLASK_APP_TEMPLATE = """\
\"\"\"{project_name} service.\"\"\"

from flask import Flask, jsonify


def create_app() -> Flask:
    app = Flask(__name__)

    @app.get("/health")
    def health():
        return jsonify(status="ok")

    return app


app = create_app()
"""

_FLASK_TEST_TEMPLATE = """\
from {pkg}.app import create_app


def test_health():
    client = create_app().test_client()
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {{"status": "ok"}}
"""


class FastAPIStrategy(GenerationStrategy):
    id = "python-fastapi"
    name = "Python FastAPI Service"
    priority = 10

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "python" and stack.framework == "fastapi"

    async def apply(self, context: GenerationContext) -> None:
        pkg = package_name(context.project_name)
        port = service_port(context.stack)
        files = context.files
        files["pyproject.toml"] = _pyproject(
            context,
            f"{context.project_name} API service",
            ["fastapi>=0.110", "uvicorn[standard]>=0.29", *_database_dependencies(context.stack)],
        )
        files[f"{pkg}/__init__.py"] = '__version__ = "0.1.0"\n'
        files[f"{pkg}/main.py"] = _FASTAPI_MAIN_TEMPLATE.format(project_name=context.project_name, pkg=pkg)
        files["tests/__init__.py"] = ""
        files["tests/test_main.py"] = _FASTAPI_TEST_TEMPLATE.format(pkg=pkg)
        files["Makefile"] = _MAKEFILE_TEMPLATE.format(pkg=pkg) + (
            f"\nrun:\n\tuvicorn {pkg}.main:app --reload --port {port}\n"
        )


class FlaskStrategy(GenerationStrategy):
    id = "python-flask"
    name = "Python Flask Service"
    priority = 10

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "python" and stack.framework == "flask"

    async def apply(self, context: GenerationContext) -> None:
        pkg = package_name(context.project_name)
        files = context.files
        files["pyproject.toml"] = _pyproject(
            context,
            f"{context.project_name} web service",
            ["flask>=3.0", *_database_dependencies(context.stack)],
        )
        files[f"{pkg}/__init__.py"] = '__version__ = "0.1.0"\n'
        files[f"{pkg}/app.py"] = _FLASK_APP_TEMPLATE.format(project_name=context.project_name)
        files["tests/__init__.py"] = ""
        files["tests/test_app.py"] = _FLASK_TEST_TEMPLATE.format(pkg=pkg)
        files["Makefile"] = _MAKEFILE_TEMPLATE.format(pkg=pkg)


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------

_LIBRARY_CORE_TEMPLATE = """\
\"\"\"Core functionality for {project_name}.\"\"\"


def slugify(text: str) -> str:
    \"\"\"Lower-case *text* and join its words with hyphens.\"\"\"
    return "-".join(text.lower().split())
"""

_LIBRARY_TEST_TEMPLATE = """\
from {pkg}.core import slugify


def test_slugify():
    assert slugify("Hello World") == "hello-world"
"""


class PythonLibraryStrategy(GenerationStrategy):
    id = "python-library"
    name = "Python Library"
    priority = 10

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "python" and stack.archetype == "library" and stack.framework == "none"

    async def apply(self, context: GenerationContext) -> None:
        pkg = package_name(context.project_name)
        files = context.files
        files["pyproject.toml"] = _pyproject(context, f"{context.project_name} library", [])
        files[f"{pkg}/__init__.py"] = (
            f"from {pkg}.core import slugify\n\n__version__ = \"0.1.0\"\n__all__ = [\"slugify\"]\n"
        )
        files[f"{pkg}/core.py"] = _LIBRARY_CORE_TEMPLATE.format(project_name=context.project_name)
        files[f"{pkg}/py.typed"] = ""
        files["tests/__init__.py"] = ""
        files["tests/test_core.py"] = _LIBRARY_TEST_TEMPLATE.format(pkg=pkg)
        files["Makefile"] = _MAKEFILE_TEMPLATE.format(pkg=pkg)


PYTHON_STRATEGIES: tuple[GenerationStrategy, ...] = (
    ClickStrategy(),
    ArgparseStrategy(),
    FastAPIStrategy(),
    FlaskStrategy(),
    PythonLibraryStrategy(),
)
