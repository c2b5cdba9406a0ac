"""Strategies that apply across languages: git, license, Docker, CI, README."""

from __future__ import annotations

from typing import assert_never

from upg.engine.strategy import GenerationContext, GenerationStrategy
from upg.matrices import (
    CICD,
    Language,
    get_archetype_name,
    get_database_name,
    get_default_port,
    get_framework_name,
    get_language_name,
)
from upg.models import EnrichmentFlags, TechStack


def package_name(project_name: str) -> str:
    """Importable module name for *project_name* (``swift-api-x1`` -> ``swift_api_x1``)."""
    return project_name.replace("-", "_").lower()


def service_port(stack: TechStack) -> int:
    """Port the generated service listens on."""
    match Language(stack.language):
        case Language.TYPESCRIPT | Language.JAVASCRIPT | Language.RUBY:
            return 3000
        case Language.PYTHON | Language.PHP:
            return 8000
        case (
            Language.GO
            | Language.RUST
            | Language.JAVA
            | Language.KOTLIN
            | Language.CSHARP
            | Language.CPP
            | Language.SWIFT
        ):
            return 8080
        case unreachable:
            assert_never(unreachable)


# ---------------------------------------------------------------------------
# .gitignore
# ---------------------------------------------------------------------------

_COMMON_IGNORES = [
    "# IDE",
    ".idea/",
    ".vscode/",
    "*.swp",
    "*.swo",
    ".DS_Store",
    "",
    "# Environment",
    ".env",
    ".env.local",
    ".env.*.local",
    "",
    "# Logs",
    "*.log",
]


def _ignore_patterns(stack: TechStack) -> tuple[list[str], list[str]]:
    """Return (dependency, build-output) ignore patterns for the language."""
    match Language(stack.language):
        case Language.TYPESCRIPT | Language.JAVASCRIPT:
            return ["node_modules/"], ["dist/", "build/", ".next/", ".nuxt/", ".output/"]
        case Language.PYTHON:
            return (
                ["__pycache__/", "*.py[cod]", "*$py.class", ".venv/", "venv/", "env/"],
                [".eggs/", "*.egg-info/", "dist/", "build/", ".pytest_cache/", ".ruff_cache/", ".mypy_cache/"],
            )
        case Language.GO:
            return ["vendor/"], ["bin/"]
        case Language.RUST:
            return ["target/"], ["Cargo.lock"] if stack.archetype == "library" else []
        case Language.JAVA | Language.KOTLIN:
            return [".gradle/"], ["target/", "build/", "*.class", "*.jar"]
        case Language.CSHARP:
            return ["packages/"], ["bin/", "obj/", "*.user", "*.suo"]
        case Language.CPP:
            return [], ["build/", "cmake-build-*/", "*.o", "*.a"]
        case Language.SWIFT:
            return [".build/"], ["*.xcodeproj/xcuserdata/", "DerivedData/"]
        case Language.RUBY:
            return [".bundle/", "vendor/bundle/"], ["*.gem"]
        case Language.PHP:
            return ["vendor/"], ["composer.lock"]
        case unreachable:
            assert_never(unreachable)


class GitignoreStrategy(GenerationStrategy):
    id = "git"
    name = "Git Configuration"
    priority = 0

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return True

    async def apply(self, context: GenerationContext) -> None:
        deps, build = _ignore_patterns(context.stack)
        lines = ["# Dependencies", *deps, "", "# Build outputs", *build, "", *_COMMON_IGNORES]
        context.files[".gitignore"] = "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# LICENSE
# ---------------------------------------------------------------------------

_MIT_TEMPLATE = """\
MIT License

Copyright (c) {project_name} Authors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""


class LicenseStrategy(GenerationStrategy):
    """MIT license for every project.

    The notice carries no year so the file stays identical across runs.
    """

    id = "license"
    name = "MIT License"
    priority = 0

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return True

    async def apply(self, context: GenerationContext) -> None:
        context.files["LICENSE"] = _MIT_TEMPLATE.format(project_name=context.project_name)


# ---------------------------------------------------------------------------
# Docker
# ---------------------------------------------------------------------------

_NODE_DOCKERFILE = """\
# Build stage
FROM node:20-alpine AS builder

WORKDIR /app
COPY package*.json ./
RUN npm install
COPY . .
RUN npm run build

# Production stage
FROM node:20-alpine AS runner

WORKDIR /app
ENV NODE_ENV=production
COPY --from=builder /app/dist ./dist
COPY --from=builder /app/package*.json ./
COPY --from=builder /app/node_modules ./node_modules

EXPOSE {port}

CMD ["node", "dist/index.js"]
"""

_PYTHON_DOCKERFILE = """\
FROM python:3.12-slim

WORKDIR /app
COPY . .
RUN pip install --no-cache-dir --upgrade pip && \\
    pip install --no-cache-dir .

EXPOSE {port}

CMD {command}
"""

_GO_DOCKERFILE = """\
# Build stage
FROM golang:1.22-alpine AS builder

WORKDIR /app
COPY go.mod go.sum* ./
RUN go mod download
COPY . .
RUN CGO_ENABLED=0 GOOS=linux go build -o /app/bin/{project_name} .

# Production stage
FROM alpine:3.19

WORKDIR /app
COPY --from=builder /app/bin/{project_name} .

EXPOSE {port}

CMD ["./{project_name}"]
"""

_RUST_DOCKERFILE = """\
# Build stage
FROM rust:1.75-slim AS builder

WORKDIR /app
COPY . .
RUN cargo build --release

# Production stage
FROM debian:bookworm-slim

WORKDIR /app
COPY --from=builder /app/target/release/{project_name} .

EXPOSE {port}

CMD ["./{project_name}"]
"""

_GENERIC_DOCKERFILE = """\
FROM {image}

WORKDIR /app
COPY . .
RUN {build}

EXPOSE {port}

CMD {command}
"""

_DOCKERIGNORE = """\
.git
.env
node_modules
target
dist
build
__pycache__
.venv
"""


_DATABASE_IMAGES = {
    "postgres": ("postgres:16-alpine", {"POSTGRES_USER": "app", "POSTGRES_PASSWORD": "app", "POSTGRES_DB": "app"}),
    "mysql": ("mysql:8.3", {"MYSQL_ROOT_PASSWORD": "app", "MYSQL_DATABASE": "app"}),
    "mongodb": ("mongo:7", {}),
    "redis": ("redis:7-alpine", {}),
    "cassandra": ("cassandra:4.1", {}),
    "neo4j": ("neo4j:5", {"NEO4J_AUTH": "neo4j/app-password"}),
}


def compose_file(stack: TechStack, project_name: str) -> str:
    """Render a docker-compose.yml with the app and, if any, its database service."""
    port = service_port(stack)
    lines = ["services:", "  app:", "    build: .", f"    image: {project_name}:latest"]
    lines += ["    ports:", f"      - \"{port}:{port}\""]
    image = _DATABASE_IMAGES.get(stack.database)
    if image is not None:
        db_port = get_default_port(stack.database)
        lines += ["    depends_on:", "      - db", "", "  db:", f"    image: {image[0]}"]
        if db_port:
            lines += ["    ports:", f"      - \"{db_port}:{db_port}\""]
        if image[1]:
            lines.append("    environment:")
            lines += [f"      {key}: {value}" for key, value in image[1].items()]
    return "\n".join(lines) + "\n"


def _dockerfile(stack: TechStack, project_name: str) -> str:
    port = service_port(stack)
    match Language(stack.language):
        case Language.TYPESCRIPT | Language.JAVASCRIPT:
            return _NODE_DOCKERFILE.format(port=port)
        case Language.PYTHON:
            pkg = package_name(project_name)
            if stack.framework == "fastapi":
                command = f'["uvicorn", "{pkg}.main:app", "--host", "0.0.0.0", "--port", "{port}"]'
            elif stack.framework == "flask":
                command = f'["flask", "--app", "{pkg}.app", "run", "--host", "0.0.0.0", "--port", "{port}"]'
            else:
                command = f'["python", "-m", "{pkg}"]'
            return _PYTHON_DOCKERFILE.format(port=port, command=command)
        case Language.GO:
            return _GO_DOCKERFILE.format(port=port, project_name=project_name)
        case Language.RUST:
            return _RUST_DOCKERFILE.format(port=port, project_name=project_name)
        case Language.JAVA | Language.KOTLIN:
            return _GENERIC_DOCKERFILE.format(
                image="eclipse-temurin:21-jdk", build="./gradlew build -x test",
                port=port, command='["java", "-jar", "build/libs/app.jar"]',
            )
        case Language.CSHARP:
            return _GENERIC_DOCKERFILE.format(
                image="mcr.microsoft.com/dotnet/sdk:8.0", build="dotnet publish -c Release -o out",
                port=port, command='["dotnet", "out/App.dll"]',
            )
        case Language.CPP:
            return _GENERIC_DOCKERFILE.format(
                image="gcc:13", build="cmake -B build && cmake --build build",
                port=port, command='["./build/app"]',
            )
        case Language.SWIFT:
            return _GENERIC_DOCKERFILE.format(
                image="swift:5.9", build="swift build -c release",
                port=port, command='["swift", "run"]',
            )
        case Language.RUBY:
            return _GENERIC_DOCKERFILE.format(
                image="ruby:3.3-slim", build="bundle install",
                port=port, command='["bundle", "exec", "ruby", "app.rb"]',
            )
        case Language.PHP:
            return _GENERIC_DOCKERFILE.format(
                image="php:8.3-cli", build="true",
                port=port, command=f'["php", "-S", "0.0.0.0:{port}", "-t", "public"]',
            )
        case unreachable:
            assert_never(unreachable)


class DockerStrategy(GenerationStrategy):
    id = "docker"
    name = "Docker Configuration"
    priority = 90

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.packaging in ("docker", "podman")

    async def apply(self, context: GenerationContext) -> None:
        context.files["Dockerfile"] = _dockerfile(context.stack, context.project_name)
        context.files[".dockerignore"] = _DOCKERIGNORE
        context.files["docker-compose.yml"] = compose_file(context.stack, context.project_name)


# ---------------------------------------------------------------------------
# CI
# ---------------------------------------------------------------------------

_GITHUB_WORKFLOW_TEMPLATE = """\
name: CI

on:
  push:
    branches: [main, master]
  pull_request:
    branches: [main, master]

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
{steps}
"""

_GITLAB_TEMPLATE = """\
image: {image}

stages:
  - test
  - build

test:
  stage: test
  script:
{test_script}

build:
  stage: build
  script:
{build_script}
"""

_CIRCLECI_TEMPLATE = """\
version: 2.1

jobs:
  build:
    docker:
      - image: {image}
    steps:
      - checkout
      - run: {test}

workflows:
  main:
    jobs:
      - build
"""


def _ci_commands(stack: TechStack) -> tuple[str, str, str]:
    """Return (ci image, test command, build command) for the language."""
    match Language(stack.language):
        case Language.TYPESCRIPT | Language.JAVASCRIPT:
            return "node:20", "npm test", "npm run build"
        case Language.PYTHON:
            return "python:3.12", "pytest", "pip install ."
        case Language.GO:
            return "golang:1.22", "go test ./...", "go build ./..."
        case Language.RUST:
            return "rust:1.75", "cargo test", "cargo build --release"
        case Language.JAVA | Language.KOTLIN:
            return "eclipse-temurin:21-jdk", "./gradlew test", "./gradlew build"
        case Language.CSHARP:
            return "mcr.microsoft.com/dotnet/sdk:8.0", "dotnet test", "dotnet build"
        case Language.CPP:
            return "gcc:13", "ctest --test-dir build", "cmake -B build && cmake --build build"
        case Language.SWIFT:
            return "swift:5.9", "swift test", "swift build"
        case Language.RUBY:
            return "ruby:3.3", "bundle exec rspec", "bundle install"
        case Language.PHP:
            return "php:8.3", "./vendor/bin/phpunit", "composer install"
        case unreachable:
            assert_never(unreachable)


def _github_steps(stack: TechStack) -> str:
    _, test, build = _ci_commands(stack)
    setup: list[str] = []
    match Language(stack.language):
        case Language.TYPESCRIPT | Language.JAVASCRIPT:
            setup = ["uses: actions/setup-node@v4", "with:", "  node-version: '20'"]
            install = "npm install"
        case Language.PYTHON:
            setup = ["uses: actions/setup-python@v5", "with:", "  python-version: '3.12'"]
            install = 'pip install -e ".[dev]"'
        case Language.GO:
            setup = ["uses: actions/setup-go@v5", "with:", "  go-version: '1.22'"]
            install = "go mod download"
        case Language.RUST:
            setup = ["uses: dtolnay/rust-toolchain@stable"]
            install = "cargo fetch"
        case _:
            install = ""

    lines: list[str] = []
    if setup:
        lines.append("      - name: Setup toolchain")
        lines.append(f"        {setup[0]}")
        lines.extend(f"        {line}" for line in setup[1:])
    if install:
        lines.append("      - name: Install dependencies")
        lines.append(f"        run: {install}")
    lines.append("      - name: Test")
    lines.append(f"        run: {test}")
    lines.append("      - name: Build")
    lines.append(f"        run: {build}")
    return "\n".join(lines)


class CIStrategy(GenerationStrategy):
    id = "ci"
    name = "CI/CD Configuration"
    priority = 95

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.cicd != "none"

    async def apply(self, context: GenerationContext) -> None:
        stack = context.stack
        image, test, build = _ci_commands(stack)
        match CICD(stack.cicd):
            case CICD.GITHUB_ACTIONS:
                context.files[".github/workflows/ci.yml"] = _GITHUB_WORKFLOW_TEMPLATE.format(
                    steps=_github_steps(stack)
                )
            case CICD.GITLAB_CI:
                context.files[".gitlab-ci.yml"] = _GITLAB_TEMPLATE.format(
                    image=image,
                    test_script=f"    - {test}",
                    build_script=f"    - {build}",
                )
            case CICD.CIRCLECI:
                context.files[".circleci/config.yml"] = _CIRCLECI_TEMPLATE.format(image=image, test=test)
            case CICD.NONE:
                pass
            case unreachable:
                assert_never(unreachable)


# ---------------------------------------------------------------------------
# README
# ---------------------------------------------------------------------------


def _prerequisites(stack: TechStack) -> str:
    match Language(stack.language):
        case Language.TYPESCRIPT | Language.JAVASCRIPT:
            return "- Node.js 20+\n- npm 10+"
        case Language.PYTHON:
            return "- Python 3.11+\n- pip"
        case Language.GO:
            return "- Go 1.22+"
        case Language.RUST:
            return "- Rust 1.75+\n- Cargo"
        case Language.JAVA | Language.KOTLIN:
            return "- JDK 17+\n- " + ("Gradle" if stack.build_tool == "gradle" else "Maven")
        case Language.CSHARP:
            return "- .NET SDK 8.0+"
        case Language.CPP:
            return "- C++ compiler (GCC 12+ or Clang 15+)\n- CMake 3.20+"
        case Language.SWIFT:
            return "- Swift 5.9+\n- Xcode 15+ (macOS)"
        case Language.RUBY:
            return "- Ruby 3.2+\n- Bundler"
        case Language.PHP:
            return "- PHP 8.2+\n- Composer"
        case unreachable:
            assert_never(unreachable)


class ReadmeStrategy(GenerationStrategy):
    """Draft README.  Enrichment may replace it with a fuller one."""

    id = "readme"
    name = "README Generation"
    priority = 100

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return True

    async def apply(self, context: GenerationContext) -> None:
        stack = context.stack
        language = get_language_name(stack.language)
        archetype = get_archetype_name(stack.archetype)
        framework = get_framework_name(stack.framework) if stack.framework != "none" else None
        _, test, build = _ci_commands(stack)

        lines = [f"# {context.project_name}", ""]
        built_with = f"{language} and {framework}" if framework else language
        lines.append(f"A {archetype.lower()} built with {built_with}.")
        lines += ["", "## Tech Stack", ""]
        lines.append(f"- **Language:** {language}")
        lines.append(f"- **Framework:** {framework or 'None'}")
        lines.append(f"- **Database:** {get_database_name(stack.database) if stack.database != 'none' else 'None'}")
        lines.append(f"- **Runtime:** {stack.runtime}")
        lines += ["", "## Prerequisites", "", _prerequisites(stack)]
        lines += ["", "## Development", "", "```bash", f"# Build\n{build}", "", f"# Test\n{test}", "```"]
        if stack.packaging == "docker":
            lines += ["", "## Docker", "", "```bash", f"docker build -t {context.project_name} .", "```"]
        lines += ["", "## License", "", "MIT", ""]
        context.files["README.md"] = "\n".join(lines)


COMMON_STRATEGIES: tuple[GenerationStrategy, ...] = (
    GitignoreStrategy(),
    LicenseStrategy(),
    DockerStrategy(),
    CIStrategy(),
    ReadmeStrategy(),
)
