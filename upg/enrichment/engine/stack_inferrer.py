"""Heuristic stack detection from a raw file map.

Used where a project arrives without a seed (e.g. a directory on disk
being exported back to a manifest).  This is inference, not resolution:
the result is a best guess, with a per-dimension confidence in ``[0, 1]``.
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from upg.matrices import LANGUAGE_BUILD_TOOLS, LANGUAGE_TEST_FRAMEWORKS
from upg.models import TechStack

logger = logging.getLogger(__name__)


class InferredStack(BaseModel):
    model_config = ConfigDict(frozen=True)

    stack: TechStack
    confidence: dict[str, float] = Field(default_factory=dict)


# First match wins within each language.
_FRAMEWORK_DEPENDENCIES: dict[str, tuple[tuple[str, tuple[str, ...]], ...]] = {
    "node": (
        ("react-native", ("react-native",)),
        ("react", ("react", "react-dom")),
        ("vue", ("vue",)),
        ("svelte", ("svelte",)),
        ("solid", ("solid-js",)),
        ("express", ("express",)),
        ("fastify", ("fastify",)),
        ("nestjs", ("@nestjs/core",)),
        ("commander", ("commander",)),
        ("yargs", ("yargs",)),
        ("tauri", ("@tauri-apps/api",)),
        ("electron", ("electron",)),
        ("phaser", ("phaser",)),
        ("pixijs", ("pixi.js",)),
    ),
    "python": (
        ("fastapi", ("fastapi",)),
        ("flask", ("flask",)),
        ("django", ("django",)),
        ("click", ("click",)),
    ),
    "rust": (
        ("axum", ("axum",)),
        ("actix", ("actix-web", "actix")),
        ("clap", ("clap",)),
        ("bevy", ("bevy",)),
        ("macroquad", ("macroquad",)),
    ),
    "go": (
        ("gin", ("github.com/gin-gonic/gin",)),
        ("echo", ("github.com/labstack/echo/v4", "github.com/labstack/echo")),
        ("cobra", ("github.com/spf13/cobra",)),
    ),
    "ruby": (("rails", ("rails",)),),
    "php": (("laravel", ("laravel/framework",)),),
}

_ARCHETYPE_FRAMEWORKS: dict[str, frozenset[str]] = {
    "backend": frozenset({
        "express", "fastify", "nestjs", "fastapi", "flask", "django", "gin", "echo",
        "axum", "actix", "spring-boot", "aspnet-core", "rails", "laravel",
    }),
    "web": frozenset({"react", "vue", "svelte", "solid"}),
    "cli": frozenset({"commander", "yargs", "clap", "cobra", "click", "argparse"}),
    "desktop": frozenset({"tauri", "electron", "flutter", "qt"}),
    "mobile": frozenset({"react-native", "swiftui", "jetpack-compose"}),
    "game": frozenset({"phaser", "pixijs", "unity", "godot-mono", "sdl2", "sfml", "bevy", "macroquad"}),
}

_ORM_DEPENDENCIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("prisma", ("prisma", "@prisma/client")),
    ("drizzle", ("drizzle-orm",)),
    ("typeorm", ("typeorm",)),
    ("sequelize", ("sequelize",)),
    ("sqlalchemy", ("sqlalchemy",)),
    ("gorm", ("gorm.io/gorm",)),
    ("diesel", ("diesel",)),
)

_DATABASE_HINTS: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("postgres", ("pg", "postgres", "psycopg", "psycopg2", "asyncpg"), "postgresql"),
    ("mysql", ("mysql2", "mysql", "pymysql"), "mysql"),
    ("sqlite", ("better-sqlite3", "sqlite3"), "sqlite"),
    ("mongodb", ("mongodb", "mongoose", "pymongo"), "mongodb"),
    ("redis", ("redis", "ioredis"), "redis"),
)

_TRANSPORT_HINTS: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("graphql", ("graphql", "@apollo/server"), "graphql"),
    ("grpc", ("@grpc/grpc-js", "grpcio"), "grpc"),
    ("trpc", ("@trpc/server",), "trpc"),
    ("websocket", ("ws", "socket.io", "websockets"), "websocket"),
)

_NODE_TEST_RUNNERS = ("vitest", "jest", "mocha")
_NODE_BUILD_TOOLS = ("vite", "webpack", "esbuild", "tsup")
_PY_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def _load_json(content: str | None) -> dict[str, Any]:
    if not content:
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def _section_names(content: str, section: str) -> list[str]:
    names: list[str] = []
    in_section = False
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("["):
            in_section = stripped == f"[{section}]"
        elif in_section and "=" in stripped:
            names.append(stripped.split("=", 1)[0].strip())
    return names


def collect_dependencies(files: Mapping[str, str]) -> set[str]:
    """Dependency names declared by any manifest in *files* (lower-cased)."""
    deps: list[str] = []

    pkg = _load_json(files.get("package.json"))
    deps += list(pkg.get("dependencies") or {})
    deps += list(pkg.get("devDependencies") or {})

    cargo = files.get("Cargo.toml")
    if cargo:
        deps += _section_names(cargo, "dependencies")
        deps += _section_names(cargo, "dev-dependencies")

    gomod = files.get("go.mod")
    if gomod:
        block = re.search(r"require\s*\(([^)]*)\)", gomod)
        if block:
            deps += [line.split()[0] for line in block.group(1).splitlines()
                     if line.strip() and not line.strip().startswith("//")]
        deps += re.findall(r"^require\s+([^\s(]+)", gomod, re.MULTILINE)

    pyproject = files.get("pyproject.toml")
    if pyproject:
        try:
            project = tomllib.loads(pyproject).get("project", {})
        except tomllib.TOMLDecodeError:
            logger.debug("Skipping unparseable pyproject.toml")
        else:
            specs = list(project.get("dependencies", []))
            for group in project.get("optional-dependencies", {}).values():
                specs += group
            deps += [m.group(1) for spec in specs if (m := _PY_NAME_RE.match(spec))]

    requirements = files.get("requirements.txt")
    if requirements:
        for line in requirements.splitlines():
            if line.strip().startswith("#"):
                continue
            if m := _PY_NAME_RE.match(line):
                deps.append(m.group(1))

    gemfile = files.get("Gemfile")
    if gemfile:
        deps += re.findall(r"""gem\s+['"]([^'"]+)['"]""", gemfile)

    composer = _load_json(files.get("composer.json"))
    deps += list(composer.get("require") or {})
    deps += list(composer.get("require-dev") or {})

    return {dep.lower() for dep in deps}


def _detect_language(files: Mapping[str, str], paths: list[str], deps: set[str]) -> str | None:
    if "package.json" in files:
        if "typescript" in deps or any(p.endswith((".ts", ".tsx")) for p in paths):
            return "typescript"
        return "javascript"
    if "Cargo.toml" in files:
        return "rust"
    if "go.mod" in files:
        return "go"
    if any(name in files for name in ("pyproject.toml", "requirements.txt", "setup.py")):
        return "python"
    if any(p.endswith(".kt") for p in paths):
        return "kotlin"
    if any(name in files for name in ("pom.xml", "build.gradle", "build.gradle.kts")):
        return "java"
    if any(p.endswith((".csproj", ".sln")) for p in paths):
        return "csharp"
    if "Gemfile" in files:
        return "ruby"
    if "composer.json" in files:
        return "php"
    if any(p.endswith(".swift") for p in paths):
        return "swift"
    if any(p.endswith((".cpp", ".cc", ".hpp")) for p in paths):
        return "cpp"
    return None


def _detect_runtime(language: str, files: Mapping[str, str]) -> str:
    match language:
        case "typescript" | "javascript":
            if "deno.json" in files or "deno.jsonc" in files:
                return "deno"
            if "bun.lockb" in files or "bunfig.toml" in files:
                return "bun"
            return "node"
        case "java" | "kotlin":
            return "jvm"
        case "csharp":
            return "dotnet"
        case _:
            return "native"


def _detect_framework(language: str, files: Mapping[str, str], deps: set[str]) -> str:
    family = "node" if language in ("typescript", "javascript") else language
    for framework, names in _FRAMEWORK_DEPENDENCIES.get(family, ()):
        if any(name in deps for name in names):
            return framework

    content = "\n".join(files.values())
    match language:
        case "python":
            if re.search(r"^\s*import argparse\b", content, re.MULTILINE):
                return "argparse"
        case "java" | "kotlin":
            if "SpringApplication" in content or "spring-boot" in content:
                return "spring-boot"
        case "csharp":
            if "Microsoft.AspNetCore" in content or "WebApplication" in content:
                return "aspnet-core"
            if "UnityEngine" in content:
                return "unity"
    return "none"


def _detect_archetype(framework: str, paths: list[str]) -> str | None:
    for archetype, frameworks in _ARCHETYPE_FRAMEWORKS.items():
        if framework in frameworks:
            return archetype
    if any(p.startswith(("src/routes/", "src/api/")) for p in paths):
        return "backend"
    if any(p.startswith(("src/components/", "src/pages/")) for p in paths):
        return "web"
    if any(p.startswith("src/commands/") or "cli" in p for p in paths):
        return "cli"
    return None


def _detect_by_hints(
    hints: tuple[tuple[str, tuple[str, ...], str], ...],
    deps: set[str],
    content: str,
) -> str | None:
    for value, names, keyword in hints:
        if any(name in deps for name in names) or keyword in content:
            return value
    return None


def _detect_orm(language: str, files: Mapping[str, str], deps: set[str]) -> str:
    for orm, names in _ORM_DEPENDENCIES:
        if any(name in deps for name in names):
            return orm
    if language == "ruby" and "rails" in deps:
        return "activerecord"
    if language == "php" and "laravel/framework" in deps:
        return "eloquent"
    if language == "csharp" and any("DbContext" in text for text in files.values()):
        return "entity-framework"
    return "none"


def _detect_packaging(paths: list[str]) -> str:
    if "Dockerfile" in paths or any(p.startswith("docker/") for p in paths):
        return "docker"
    if any("Containerfile" in p for p in paths):
        return "podman"
    if "flake.nix" in paths or "default.nix" in paths:
        return "nix"
    return "none"


def _detect_cicd(paths: list[str]) -> str:
    if any(p.startswith(".github/workflows/") for p in paths):
        return "github-actions"
    if ".gitlab-ci.yml" in paths:
        return "gitlab-ci"
    if ".circleci/config.yml" in paths:
        return "circleci"
    return "none"


def _detect_build_tool(language: str, files: Mapping[str, str], deps: set[str]) -> tuple[str, bool]:
    """Return (build tool, detected) where *detected* is False for a fallback."""
    if language in ("typescript", "javascript"):
        for tool in _NODE_BUILD_TOOLS:
            if tool in deps:
                return tool, True
    if language in ("java", "kotlin"):
        if "build.gradle" in files or "build.gradle.kts" in files:
            return "gradle", True
        if "pom.xml" in files:
            return "maven", True
    if "CMakeLists.txt" in files:
        return "cmake", True
    if language == "rust":
        return "cargo", True
    if "Makefile" in files:
        return "make", True
    return LANGUAGE_BUILD_TOOLS[language][0], False


def _detect_styling(deps: set[str], paths: list[str]) -> str:
    if "tailwindcss" in deps or any(p.startswith("tailwind.config.") for p in paths):
        return "tailwind"
    if "styled-components" in deps:
        return "styled-components"
    if "sass" in deps or any(p.endswith(".scss") for p in paths):
        return "scss"
    if any(p.endswith(".module.css") for p in paths):
        return "css-modules"
    if any(p.endswith(".css") for p in paths):
        return "vanilla"
    return "none"


def _detect_testing(language: str, deps: set[str]) -> tuple[str, bool]:
    if language in ("typescript", "javascript"):
        for runner in _NODE_TEST_RUNNERS:
            if runner in deps:
                return runner, True
        return "vitest", False
    return LANGUAGE_TEST_FRAMEWORKS[language][0], True


def infer_stack(files: Mapping[str, str]) -> InferredStack:
    """Guess the :class:`TechStack` behind *files*.

    Unknown dimensions fall back to the commonest value for the detected
    language, with a low confidence score.
    """
    paths = list(files)
    deps = collect_dependencies(files)
    content = "\n".join(files.values()).lower()
    confidence: dict[str, float] = {}

    detected_language = _detect_language(files, paths, deps)
    language = detected_language or "typescript"
    confidence["language"] = 0.9 if detected_language else 0.1

    runtime = _detect_runtime(language, files)
    confidence["runtime"] = 0.8 if runtime != "native" else 0.3

    framework = _detect_framework(language, files, deps)
    confidence["framework"] = 0.8 if framework != "none" else 0.2

    archetype = _detect_archetype(framework, paths)
    confidence["archetype"] = 0.7 if archetype else 0.3
    archetype = archetype or ("library" if framework == "none" else "backend")

    database = _detect_by_hints(_DATABASE_HINTS, deps, content) or "none"
    confidence["database"] = 0.7 if database != "none" else 0.3

    orm = _detect_orm(language, files, deps)
    confidence["orm"] = 0.8 if orm != "none" else 0.2

    transport = _detect_by_hints(_TRANSPORT_HINTS, deps, content) or "rest"
    confidence["transport"] = 0.5

    packaging = _detect_packaging(paths)
    confidence["packaging"] = 0.9 if packaging != "none" else 0.3

    cicd = _detect_cicd(paths)
    confidence["cicd"] = 0.9 if cicd != "none" else 0.3

    build_tool, found = _detect_build_tool(language, files, deps)
    confidence["build_tool"] = 0.8 if found else 0.3

    styling = _detect_styling(deps, paths)
    confidence["styling"] = 0.7 if styling != "none" else 0.2

    testing, found = _detect_testing(language, deps)
    confidence["testing"] = 0.8 if found else 0.3

    stack = TechStack(
        archetype=archetype,
        language=language,
        runtime=runtime,
        framework=framework,
        database=database,
        orm=orm,
        transport=transport,
        packaging=packaging,
        cicd=cicd,
        build_tool=build_tool,
        styling=styling,
        testing=testing,
    )
    logger.debug("Inferred %s/%s/%s", stack.archetype, stack.language, stack.framework)
    return InferredStack(stack=stack, confidence=confidence)
