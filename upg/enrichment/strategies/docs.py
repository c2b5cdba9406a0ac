"""README enrichment.  Runs late so it can describe what earlier
enrichments added."""

from __future__ import annotations

from upg.engine.strategy import EnrichmentContext, EnrichmentStrategy
from upg.matrices import get_database_name, get_framework_name, get_language_name
from upg.models import EnrichmentFlags, TechStack

_SETUP = {
    "node": ["npm install", "npm run dev"],
    "python": ["python -m venv .venv", "source .venv/bin/activate", 'pip install -e ".[dev]"'],
    "go": ["go mod download", "go run ."],
    "rust": ["cargo build", "cargo run"],
}


def render_file_tree(paths: list[str]) -> str:
    """Indented tree of *paths*, directories first."""
    tree: dict = {}
    for path in paths:
        node = tree
        for part in path.split("/"):
            node = node.setdefault(part, {})

    lines: list[str] = []

    def walk(node: dict, depth: int) -> None:
        entries = sorted(node.items(), key=lambda item: (not item[1], item[0]))
        for name, children in entries:
            suffix = "/" if children else ""
            lines.append(f"{'  ' * depth}{name}{suffix}")
            walk(children, depth + 1)

    walk(tree, 0)
    return "\n".join(lines) + "\n"


def _family(language: str) -> str:
    return "node" if language in ("typescript", "javascript") else language


def render_readme(context: EnrichmentContext, paths: list[str]) -> str:
    stack, introspect, name = context.stack, context.introspect, context.project_name
    has_docker = introspect.has_file("Dockerfile")
    has_compose = "docker-compose.yml" in paths
    ports = introspect.get_exposed_ports()
    port = ports[0] if ports else 3000

    language = get_language_name(stack.language)
    framework = get_framework_name(stack.framework) if stack.framework != "none" else None

    lines = [f"# {name}", ""]
    badges = []
    if stack.cicd == "github-actions":
        badges.append(f"![CI](https://github.com/username/{name}/actions/workflows/ci.yml/badge.svg)")
    badges.append("![License: MIT](https://img.shields.io/badge/License-MIT-yellow.svg)")
    lines += [" ".join(badges), ""]

    built_with = f"{framework} and {language}" if framework else language
    lines += [f"A {stack.archetype} project built with {built_with}.", ""]

    lines += ["## Tech Stack", "", "| Category | Technology |", "|----------|------------|"]
    lines.append(f"| Language | {language} |")
    if framework:
        lines.append(f"| Framework | {framework} |")
    lines.append(f"| Runtime | {stack.runtime} |")
    if stack.database != "none":
        lines.append(f"| Database | {get_database_name(stack.database)} |")
    if stack.orm != "none":
        lines.append(f"| ORM | {stack.orm} |")
    if stack.packaging != "none":
        lines.append(f"| Container | {stack.packaging} |")
    if stack.cicd != "none":
        lines.append(f"| CI/CD | {stack.cicd} |")
    lines += [f"| Testing | {stack.testing} |", ""]

    setup = _SETUP.get(_family(stack.language))
    if setup:
        lines += ["## Getting Started", "", "```bash", *setup, "```", ""]

    if context.flags.depth != "minimal":
        lines += ["## Project Structure", "", "```", render_file_tree(paths).rstrip("\n"), "```", ""]
        if stack.archetype == "backend" and stack.transport == "rest":
            lines += [
                "## API",
                "",
                f"The API listens on `http://localhost:{port}` by default.",
                "",
                "| Method | Endpoint | Description |",
                "|--------|----------|-------------|",
                "| GET | /health | Health check |",
                "",
            ]
        elif stack.archetype == "backend" and stack.transport == "graphql":
            lines += ["## API", "", f"GraphQL endpoint: `http://localhost:{port}/graphql`.", ""]

    if has_docker:
        lines += ["## Docker", "", "```bash"]
        if has_compose:
            lines += ["docker compose up -d", "docker compose down"]
        else:
            lines += [f"docker build -t {name} .", f"docker run -p {port}:{port} {name}"]
        lines += ["```", ""]

    test_command = introspect.get_test_command()
    if test_command:
        lines += ["## Testing", "", "```bash", test_command, "```", ""]

    lines += ["## License", "", "MIT. See [LICENSE](LICENSE).", ""]
    return "\n".join(lines)


class ReadmeEnrichStrategy(EnrichmentStrategy):
    id = "enrich-readme"
    name = "README Enhancement"
    priority = 90

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.docs)

    async def apply(self, context: EnrichmentContext) -> None:
        paths = sorted({*context.files, "README.md"})
        context.files["README.md"] = render_readme(context, paths)
