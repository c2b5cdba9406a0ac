"""CI enrichments: fuller GitHub Actions and GitLab CI pipelines, plus a
tag-triggered release workflow."""

from __future__ import annotations

import logging

from upg.engine.strategy import EnrichmentContext, EnrichmentStrategy
from upg.models import EnrichmentFlags, TechStack

logger = logging.getLogger(__name__)

_WORKFLOW_HEADER = """\
name: CI

on:
  push:
    branches: [main, master]
  pull_request:
    branches: [main, master]

concurrency:
  group: ${{{{ github.workflow }}}}-${{{{ github.ref }}}}
  cancel-in-progress: true

jobs:
  build:
    runs-on: ubuntu-latest{matrix}
    steps:
      - uses: actions/checkout@v4
{setup}
      - name: Install dependencies
        run: {install}
{lint}
      - name: Test
        run: {test}
{build}"""

_DOCKER_JOB = """
  docker:
    runs-on: ubuntu-latest
    needs: build
    steps:
      - uses: actions/checkout@v4
      - uses: docker/setup-buildx-action@v3
      - name: Build image
        uses: docker/build-push-action@v5
        with:
          context: .
          push: false
          tags: ${{{{ github.repository }}}}:test
      - name: Smoke test
        run: |
          docker run -d -p {port}:{port} --name smoke ${{{{ github.repository }}}}:test
          sleep 5
          curl -f http://localhost:{port}/health || echo "no health endpoint"
          docker stop smoke
"""

# language family -> (matrix key, versions, default version, setup action, cache)
_TOOLCHAINS = {
    "node": ("node-version", ("18", "20", "22"), "20", "actions/setup-node@v4", "npm"),
    "python": ("python-version", ("3.11", "3.12", "3.13"), "3.12", "actions/setup-python@v5", "pip"),
    "go": ("go-version", ("1.21", "1.22"), "1.22", "actions/setup-go@v5", None),
    "jvm": ("java-version", ("17", "21"), "21", "actions/setup-java@v4", "gradle"),
}

_INSTALL = {
    "node": "npm ci",
    "python": 'pip install -e ".[dev]"',
    "go": "go mod download",
    "rust": "cargo fetch",
    "jvm": "./gradlew dependencies",
}

_LINT = {
    "python": "ruff check .",
    "go": "go vet ./...",
    "rust": "cargo clippy -- -D warnings",
}


def _family(language: str) -> str:
    match language:
        case "typescript" | "javascript":
            return "node"
        case "java" | "kotlin":
            return "jvm"
        case _:
            return language


def _step(name: str, body: list[str]) -> str:
    return "\n".join([f"      - name: {name}", *(f"        {line}" for line in body)])


def render_github_workflow(context: EnrichmentContext) -> str:
    stack, introspect, flags = context.stack, context.introspect, context.flags
    family = _family(stack.language)
    full = flags.depth == "full"

    matrix = ""
    setup = ""
    toolchain = _TOOLCHAINS.get(family)
    if toolchain is not None:
        key, versions, default, action, cache = toolchain
        version = default
        if full:
            matrix = "\n    strategy:\n      matrix:\n        {}: [{}]".format(
                key, ", ".join(f"'{v}'" for v in versions)
            )
            version = "${{ matrix." + key + " }}"
        body = [f"uses: {action}", "with:", f"  {key}: '{version}'"]
        if family == "jvm":
            body.append("  distribution: temurin")
        if cache:
            body.append(f"  cache: {cache}")
        setup = _step("Setup toolchain", body)
    elif family == "rust":
        setup = _step("Setup toolchain", ["uses: dtolnay/rust-toolchain@stable"]) + "\n" + _step(
            "Cache cargo", ["uses: Swatinem/rust-cache@v2"]
        )

    manifest = introspect.get_manifest()
    lint_command = manifest.scripts.get("lint") or _LINT.get(family)
    test_command = introspect.get_test_command() or "make test"
    build_command = introspect.get_build_command()
    if family == "node":
        test_command = "npm test"
        lint_command = "npm run lint" if "lint" in manifest.scripts else None
        build_command = "npm run build" if "build" in manifest.scripts else None

    workflow = _WORKFLOW_HEADER.format(
        matrix=matrix,
        setup=setup,
        install=_INSTALL.get(family, "make install"),
        lint=("\n" + _step("Lint", [f"run: {lint_command}"])) if lint_command else "",
        test=test_command,
        build=(_step("Build", [f"run: {build_command}"]) + "\n") if build_command else "",
    )

    ports = introspect.get_exposed_ports()
    if full and introspect.has_file("Dockerfile"):
        workflow += _DOCKER_JOB.format(port=ports[0] if ports else 3000)
    return workflow


class GitHubActionsStrategy(EnrichmentStrategy):
    id = "enrich-github-actions"
    name = "GitHub Actions Enhancement"
    priority = 15

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.cicd) and stack.cicd == "github-actions"

    async def apply(self, context: EnrichmentContext) -> None:
        context.files[".github/workflows/ci.yml"] = render_github_workflow(context)


# ---------------------------------------------------------------------------
# GitLab
# ---------------------------------------------------------------------------

_GITLAB_TEMPLATE = """\
stages:
  - lint
  - test
  - build{docker_stage}

default:
  image: {image}
  cache:
    key: ${{CI_COMMIT_REF_SLUG}}
    paths:
      - {cache_path}

before_script:
  - {install}

lint:
  stage: lint
  script:
    - {lint}

test:
  stage: test
  script:
    - {test}

build:
  stage: build
  script:
    - {build}
{docker_job}"""

_GITLAB_DOCKER_JOB = """
docker:
  stage: docker
  image: docker:24
  services:
    - docker:24-dind
  before_script: []
  script:
    - docker build -t $CI_REGISTRY_IMAGE:$CI_COMMIT_SHORT_SHA .
"""

_GITLAB_IMAGES = {
    "node": ("node:20", "node_modules/", "npm run lint", "npm run build"),
    "python": ("python:3.12", ".cache/pip", "ruff check .", "pip install build && python -m build"),
    "go": ("golang:1.22", ".go/pkg/mod/", "go vet ./...", "go build ./..."),
    "rust": ("rust:1.75", "target/", "cargo clippy -- -D warnings", "cargo build --release"),
    "jvm": ("eclipse-temurin:21-jdk", ".gradle/", "./gradlew check -x test", "./gradlew build -x test"),
}


def render_gitlab_ci(context: EnrichmentContext) -> str:
    family = _family(context.stack.language)
    image, cache_path, lint, build = _GITLAB_IMAGES.get(
        family, ("ubuntu:22.04", ".cache/", "make lint", "make build")
    )
    docker = context.introspect.has_file("Dockerfile")
    return _GITLAB_TEMPLATE.format(
        docker_stage="\n  - docker" if docker else "",
        image=image,
        cache_path=cache_path,
        install=_INSTALL.get(family, "make install"),
        lint=lint,
        test=context.introspect.get_test_command() or "make test",
        build=build,
        docker_job=_GITLAB_DOCKER_JOB if docker else "",
    )


class GitLabCIStrategy(EnrichmentStrategy):
    id = "enrich-gitlab-ci"
    name = "GitLab CI Enhancement"
    priority = 16

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.cicd) and stack.cicd == "gitlab-ci"

    async def apply(self, context: EnrichmentContext) -> None:
        context.files[".gitlab-ci.yml"] = render_gitlab_ci(context)


# ---------------------------------------------------------------------------
# Release
# ---------------------------------------------------------------------------

_RELEASE_TEMPLATE = """\
name: Release

on:
  push:
    tags:
      - 'v*'

permissions:
  contents: write

jobs:
  release:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
        with:
          fetch-depth: 0
{build_steps}
      - name: Create GitHub release
        uses: softprops/action-gh-release@v2
        with:
          generate_release_notes: true
"""

_RELEASE_BUILD = {
    "node": ["uses: actions/setup-node@v4", "with:", "  node-version: '20'"],
    "python": ["uses: actions/setup-python@v5", "with:", "  python-version: '3.12'"],
    "rust": ["uses: dtolnay/rust-toolchain@stable"],
    "go": ["uses: actions/setup-go@v5", "with:", "  go-version: '1.22'"],
}

_RELEASE_COMMAND = {
    "node": "npm ci && npm run build --if-present",
    "python": "pip install build && python -m build",
    "rust": "cargo build --release",
    "go": "go build ./...",
}


class ReleaseStrategy(EnrichmentStrategy):
    id = "enrich-release"
    name = "Release Automation"
    priority = 20

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.release) and stack.cicd == "github-actions"

    async def apply(self, context: EnrichmentContext) -> None:
        family = _family(context.stack.language)
        steps: list[str] = []
        if family in _RELEASE_BUILD:
            steps.append(_step("Setup toolchain", _RELEASE_BUILD[family]))
            steps.append(_step("Build", [f"run: {_RELEASE_COMMAND[family]}"]))
        else:
            logger.debug("No release build steps for %s", context.stack.language)
        if context.introspect.has_file("Dockerfile"):
            image = "${{ github.repository }}:${{ github.ref_name }}"
            steps.append(_step("Build image", [f"run: docker build -t {image} ."]))
        build_steps = "\n".join(steps)
        context.files[".github/workflows/release.yml"] = _RELEASE_TEMPLATE.format(build_steps=build_steps)
