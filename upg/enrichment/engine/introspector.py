"""Read-only queries over a generated project's file map.

Enrichment strategies use :class:`ProjectIntrospector` to learn what
Pass 1 produced (manifest, entry point, commands, ports) before deciding
what to add.
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from types import MappingProxyType
from typing import Any, Callable, Mapping

from upg.models import ParsedManifest, TechStack

logger = logging.getLogger(__name__)

# Ordered: the first manifest type with any present file wins.
MANIFEST_PRECEDENCE: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("npm", ("package.json",)),
    ("cargo", ("Cargo.toml",)),
    ("python", ("pyproject.toml", "setup.py", "requirements.txt")),
    ("gomod", ("go.mod",)),
    ("maven", ("pom.xml",)),
    ("gradle", ("build.gradle", "build.gradle.kts")),
    ("gemspec", ("Gemfile",)),
    ("composer", ("composer.json",)),
)

ENTRY_POINT_CANDIDATES: dict[str, tuple[str, ...]] = {
    "typescript": ("src/index.ts", "src/main.ts", "src/app.ts", "src/server.ts", "index.ts"),
    "javascript": ("src/index.js", "src/index.mjs", "src/main.js", "src/app.js", "index.js"),
    "python": ("src/main.py", "main.py", "app.py", "src/app.py", "src/__main__.py"),
    "rust": ("src/main.rs", "src/lib.rs"),
    "go": ("main.go", "cmd/main.go", "cmd/server/main.go"),
    "java": ("src/main/java/com/example/Application.java", "src/main/java/Application.java"),
    "kotlin": ("src/main/kotlin/com/example/Application.kt",),
    "csharp": ("Program.cs", "src/Program.cs"),
    "cpp": ("src/main.cpp", "main.cpp"),
    "swift": ("Sources/main.swift", "Sources/App.swift"),
    "ruby": ("app.rb", "config.ru", "lib/main.rb"),
    "php": ("public/index.php", "index.php", "src/index.php"),
}

_EXPOSE_RE = re.compile(r"^\s*EXPOSE\s+(\d+)", re.MULTILINE)
_REQUIREMENT_NAME_RE = re.compile(r"^([A-Za-z0-9][A-Za-z0-9._-]*)")
_TOML_KEY_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*=")


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a path glob: ``*`` stays within a segment, ``**`` crosses them."""
    segments = [re.escape(part).replace(r"\*", "[^/]*") for part in pattern.split("**")]
    return re.compile("^" + ".*".join(segments) + "$")


def _requirement_name(spec: str) -> str | None:
    match = _REQUIREMENT_NAME_RE.match(spec.strip())
    return match.group(1) if match else None


def _str_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}


def _toml_section_keys(content: str, section: str) -> dict[str, str]:
    """Keys of a ``[section]`` table, read line by line (tolerates invalid TOML)."""
    keys: dict[str, str] = {}
    in_section = False
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("["):
            in_section = stripped == f"[{section}]"
            continue
        if in_section:
            match = _TOML_KEY_RE.match(stripped)
            if match:
                keys[match.group(1)] = stripped.split("=", 1)[1].strip().strip('"')
    return keys


class ProjectIntrospector:
    """Query a project's files without being able to change them.

    Parameters
    ----------
    files:
        The file map to inspect.  It is wrapped in a read-only proxy, so
        the introspector always sees the live content of the mapping it
        was given.
    stack:
        The project's stack; selects entry-point candidates.
    """

    def __init__(self, files: Mapping[str, str], stack: TechStack) -> None:
        self._files = MappingProxyType(files)
        self._stack = stack
        self._manifest: ParsedManifest | None = None

    # -- file queries -------------------------------------------------------

    def has_file(self, path: str) -> bool:
        return path in self._files

    def get_content(self, path: str) -> str | None:
        return self._files.get(path)

    def get_all_paths(self) -> list[str]:
        return list(self._files)

    def find_files(self, pattern: str) -> list[str]:
        """Return every path matching the glob *pattern*, in file-map order."""
        regex = glob_to_regex(pattern)
        return [path for path in self._files if regex.match(path)]

    def parse_json(self, path: str) -> Any | None:
        """Parse *path* as JSON; ``None`` if it is missing, empty or malformed."""
        content = self.get_content(path)
        if not content:
            return None
        try:
            return json.loads(content)
        except (ValueError, RecursionError):
            logger.debug("Could not parse %s as JSON", path)
            return None

    # -- structure ----------------------------------------------------------

    def get_entry_point(self) -> str | None:
        for candidate in ENTRY_POINT_CANDIDATES.get(self._stack.language, ()):
            if self.has_file(candidate):
                return candidate
        return None

    def get_test_command(self) -> str | None:
        return self.get_manifest().scripts.get("test")

    def get_build_command(self) -> str | None:
        return self.get_manifest().scripts.get("build")

    def get_exposed_ports(self) -> list[int]:
        dockerfile = self.get_content("Dockerfile")
        if not dockerfile:
            return []
        return [int(port) for port in _EXPOSE_RE.findall(dockerfile)]

    def get_manifest(self) -> ParsedManifest:
        """Parse the project's package manifest.

        The first entry of :data:`MANIFEST_PRECEDENCE` with a present file
        decides the parser.  The result is cached: repeat calls return the
        same object.
        """
        if self._manifest is None:
            self._manifest = self._parse_manifest()
        return self._manifest

    def _parse_manifest(self) -> ParsedManifest:
        parsers: dict[str, Callable[[], ParsedManifest]] = {
            "npm": self._parse_npm,
            "cargo": self._parse_cargo,
            "python": self._parse_python,
            "gomod": self._parse_go,
            "maven": lambda: ParsedManifest(
                type="maven", scripts={"build": "mvn package", "test": "mvn test"}
            ),
            "gradle": lambda: ParsedManifest(
                type="gradle", scripts={"build": "./gradlew build", "test": "./gradlew test"}
            ),
            "gemspec": lambda: ParsedManifest(
                type="gemspec",
                scripts={"test": "bundle exec rspec", "lint": "bundle exec rubocop"},
            ),
            "composer": self._parse_composer,
        }
        for manifest_type, paths in MANIFEST_PRECEDENCE:
            if any(self.has_file(path) for path in paths):
                logger.debug("Detected %s manifest", manifest_type)
                return parsers[manifest_type]()
        return ParsedManifest(type="unknown")

    # -- manifest parsers ---------------------------------------------------

    def _parse_npm(self) -> ParsedManifest:
        pkg = self.parse_json("package.json")
        if not isinstance(pkg, dict):
            return ParsedManifest(type="npm")
        return ParsedManifest(
            type="npm",
            name=pkg["name"] if isinstance(pkg.get("name"), str) else None,
            dependencies=_str_map(pkg.get("dependencies")),
            dev_dependencies=_str_map(pkg.get("devDependencies")),
            scripts=_str_map(pkg.get("scripts")),
            raw=pkg,
        )

    def _parse_cargo(self) -> ParsedManifest:
        content = self.get_content("Cargo.toml") or ""
        package = _toml_section_keys(content, "package")
        return ParsedManifest(
            type="cargo",
            name=package.get("name"),
            dependencies=_toml_section_keys(content, "dependencies"),
            dev_dependencies=_toml_section_keys(content, "dev-dependencies"),
            scripts={"build": "cargo build", "test": "cargo test", "lint": "cargo clippy"},
            raw=content,
        )

    def _parse_python(self) -> ParsedManifest:
        name: str | None = None
        dependencies: dict[str, str] = {}
        dev_dependencies: dict[str, str] = {}
        raw: Any = None

        pyproject = self.get_content("pyproject.toml")
        if pyproject:
            try:
                raw = tomllib.loads(pyproject)
            except tomllib.TOMLDecodeError:
                logger.warning("pyproject.toml is not valid TOML; ignoring it")
            else:
                project = raw.get("project", {})
                name = project.get("name")
                for spec in project.get("dependencies", []):
                    dep = _requirement_name(spec)
                    if dep:
                        dependencies[dep] = spec
                for group in project.get("optional-dependencies", {}).values():
                    for spec in group:
                        dep = _requirement_name(spec)
                        if dep:
                            dev_dependencies[dep] = spec

        requirements = self.get_content("requirements.txt")
        if requirements:
            for line in requirements.splitlines():
                line = line.strip()
                if not line or line.startswith(("#", "-")):
                    continue
                dep = _requirement_name(line)
                if dep:
                    dependencies.setdefault(dep, line)

        return ParsedManifest(
            type="python",
            name=name,
            dependencies=dependencies,
            dev_dependencies=dev_dependencies,
            scripts={"test": "pytest", "lint": "ruff check ."},
            raw=raw,
        )

    def _parse_go(self) -> ParsedManifest:
        content = self.get_content("go.mod") or ""
        module = re.search(r"^module\s+(\S+)", content, re.MULTILINE)
        dependencies: dict[str, str] = {}
        block = re.search(r"require\s*\(([^)]*)\)", content)
        if block:
            for line in block.group(1).splitlines():
                fields = line.split()
                if len(fields) >= 2:
                    dependencies[fields[0]] = fields[1]
        return ParsedManifest(
            type="gomod",
            name=module.group(1) if module else None,
            dependencies=dependencies,
            scripts={"build": "go build ./...", "test": "go test ./...", "lint": "golangci-lint run"},
            raw=content,
        )

    def _parse_composer(self) -> ParsedManifest:
        pkg = self.parse_json("composer.json")
        if not isinstance(pkg, dict):
            return ParsedManifest(type="composer")
        raw_scripts = pkg.get("scripts")
        scripts = _str_map({
            key: " && ".join(map(str, value)) if isinstance(value, list) else value
            for key, value in (raw_scripts if isinstance(raw_scripts, dict) else {}).items()
        })
        return ParsedManifest(
            type="composer",
            name=pkg["name"] if isinstance(pkg.get("name"), str) else None,
            dependencies=_str_map(pkg.get("require")),
            dev_dependencies=_str_map(pkg.get("require-dev")),
            scripts=scripts,
            raw=pkg,
        )
