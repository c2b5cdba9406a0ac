"""Archetype matrix: which languages each kind of project may use."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from upg.matrices.dimensions import Archetype, Language

L = Language


class ArchetypeEntry(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: Archetype
    name: str
    description: str
    compatible_languages: tuple[Language, ...]


ARCHETYPES: tuple[ArchetypeEntry, ...] = (
    ArchetypeEntry(
        id=Archetype.WEB,
        name="Web Application",
        description="Client-side web application (SPA, SSR, or static)",
        compatible_languages=(L.TYPESCRIPT, L.JAVASCRIPT),
    ),
    ArchetypeEntry(
        id=Archetype.BACKEND,
        name="Backend API",
        description="Server-side API or service",
        compatible_languages=(
            L.TYPESCRIPT, L.JAVASCRIPT, L.PYTHON, L.GO, L.RUST,
            L.JAVA, L.KOTLIN, L.CSHARP, L.RUBY, L.PHP,
        ),
    ),
    ArchetypeEntry(
        id=Archetype.CLI,
        name="CLI Tool",
        description="Command-line interface application",
        compatible_languages=(L.TYPESCRIPT, L.JAVASCRIPT, L.PYTHON, L.GO, L.RUST),
    ),
    ArchetypeEntry(
        id=Archetype.MOBILE,
        name="Mobile App",
        description="iOS, Android, or cross-platform mobile application",
        compatible_languages=(L.TYPESCRIPT, L.KOTLIN, L.SWIFT),
    ),
    ArchetypeEntry(
        id=Archetype.DESKTOP,
        name="Desktop App",
        description="Cross-platform desktop application",
        compatible_languages=(L.TYPESCRIPT, L.RUST, L.CPP),
    ),
    ArchetypeEntry(
        id=Archetype.LIBRARY,
        name="Library/Package",
        description="Reusable library or package",
        compatible_languages=(
            L.TYPESCRIPT, L.JAVASCRIPT, L.PYTHON, L.GO, L.RUST, L.JAVA,
            L.KOTLIN, L.CSHARP, L.CPP, L.RUBY, L.PHP,
        ),
    ),
    ArchetypeEntry(
        id=Archetype.GAME,
        name="Game",
        description="Video game or interactive experience",
        compatible_languages=(L.TYPESCRIPT, L.CSHARP, L.CPP, L.RUST),
    ),
)

ARCHETYPE_MAP: dict[str, ArchetypeEntry] = {entry.id: entry for entry in ARCHETYPES}

# Archetypes that ship without a framework.
FRAMEWORKLESS_ARCHETYPES: tuple[str, ...] = ("library",)


def get_languages_for_archetype(archetype: str) -> tuple[str, ...]:
    entry = ARCHETYPE_MAP.get(archetype)
    return entry.compatible_languages if entry else ()


def is_language_compatible(archetype: str, language: str) -> bool:
    return language in get_languages_for_archetype(archetype)


def get_archetype_name(archetype: str) -> str:
    entry = ARCHETYPE_MAP.get(archetype)
    return entry.name if entry else archetype
