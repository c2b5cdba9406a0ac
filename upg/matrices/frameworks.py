"""Framework matrix: owning language, archetypes and default tooling."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from upg.matrices.dimensions import Archetype, BuildTool, Framework, Language, TestingFramework

A = Archetype
B = BuildTool
F = Framework
L = Language
T = TestingFramework


class FrameworkEntry(BaseModel):
    """Static facts about one framework.

    ``archetypes`` is a tuple because a few frameworks (Flutter) target
    more than one kind of project.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: Framework
    name: str
    language: Language
    archetypes: tuple[Archetype, ...]
    default_build_tool: BuildTool
    default_testing: TestingFramework


def _fw(
    fid: Framework,
    name: str,
    language: Language,
    archetypes: tuple[Archetype, ...],
    build: BuildTool,
    testing: TestingFramework,
) -> FrameworkEntry:
    return FrameworkEntry(
        id=fid,
        name=name,
        language=language,
        archetypes=archetypes,
        default_build_tool=build,
        default_testing=testing,
    )


FRAMEWORKS: tuple[FrameworkEntry, ...] = (
    # Web
    _fw(F.REACT, "React", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    _fw(F.VUE, "Vue", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    _fw(F.SVELTE, "Svelte", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    _fw(F.SOLID, "SolidJS", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    _fw(F.ANGULAR, "Angular", L.TYPESCRIPT, (A.WEB,), B.WEBPACK, T.JEST),
    _fw(F.QWIK, "Qwik", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    _fw(F.NEXTJS, "Next.js", L.TYPESCRIPT, (A.WEB,), B.WEBPACK, T.JEST),
    _fw(F.NUXT, "Nuxt", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    _fw(F.SVELTEKIT, "SvelteKit", L.TYPESCRIPT, (A.WEB,), B.VITE, T.VITEST),
    # Backend - Node.js
    _fw(F.EXPRESS, "Express", L.TYPESCRIPT, (A.BACKEND,), B.TSUP, T.VITEST),
    _fw(F.FASTIFY, "Fastify", L.TYPESCRIPT, (A.BACKEND,), B.TSUP, T.VITEST),
    _fw(F.NESTJS, "NestJS", L.TYPESCRIPT, (A.BACKEND,), B.WEBPACK, T.JEST),
    # Backend - Python
    _fw(F.FASTAPI, "FastAPI", L.PYTHON, (A.BACKEND,), B.MAKE, T.PYTEST),
    _fw(F.FLASK, "Flask", L.PYTHON, (A.BACKEND,), B.MAKE, T.PYTEST),
    _fw(F.DJANGO, "Django", L.PYTHON, (A.BACKEND,), B.MAKE, T.PYTEST),
    # Backend - Go
    _fw(F.GIN, "Gin", L.GO, (A.BACKEND,), B.MAKE, T.GO_TEST),
    _fw(F.ECHO, "Echo", L.GO, (A.BACKEND,), B.MAKE, T.GO_TEST),
    # Backend - Rust
    _fw(F.AXUM, "Axum", L.RUST, (A.BACKEND,), B.CARGO, T.RUST_TEST),
    _fw(F.ACTIX, "Actix Web", L.RUST, (A.BACKEND,), B.CARGO, T.RUST_TEST),
    # Backend - JVM / .NET / Ruby / PHP
    _fw(F.SPRING_BOOT, "Spring Boot", L.JAVA, (A.BACKEND,), B.GRADLE, T.JUNIT),
    _fw(F.ASPNET_CORE, "ASP.NET Core", L.CSHARP, (A.BACKEND,), B.MSBUILD, T.XUNIT),
    _fw(F.RAILS, "Ruby on Rails", L.RUBY, (A.BACKEND,), B.MAKE, T.RSPEC),
    _fw(F.LARAVEL, "Laravel", L.PHP, (A.BACKEND,), B.MAKE, T.PHPUNIT),
    # CLI
    _fw(F.COMMANDER, "Commander.js", L.TYPESCRIPT, (A.CLI,), B.TSUP, T.VITEST),
    _fw(F.YARGS, "Yargs", L.TYPESCRIPT, (A.CLI,), B.TSUP, T.VITEST),
    _fw(F.CLAP, "Clap", L.RUST, (A.CLI,), B.CARGO, T.RUST_TEST),
    _fw(F.COBRA, "Cobra", L.GO, (A.CLI,), B.MAKE, T.GO_TEST),
    _fw(F.CLICK, "Click", L.PYTHON, (A.CLI,), B.MAKE, T.PYTEST),
    _fw(F.ARGPARSE, "argparse", L.PYTHON, (A.CLI,), B.MAKE, T.PYTEST),
    # Desktop
    _fw(F.TAURI, "Tauri", L.RUST, (A.DESKTOP,), B.CARGO, T.RUST_TEST),
    _fw(F.ELECTRON, "Electron", L.TYPESCRIPT, (A.DESKTOP,), B.VITE, T.VITEST),
    _fw(F.QT, "Qt", L.CPP, (A.DESKTOP,), B.CMAKE, T.GTEST),
    # Mobile (Kotlin stands in for Dart in Flutter's entry)
    _fw(F.REACT_NATIVE, "React Native", L.TYPESCRIPT, (A.MOBILE,), B.WEBPACK, T.JEST),
    _fw(F.FLUTTER, "Flutter", L.KOTLIN, (A.MOBILE, A.DESKTOP), B.GRADLE, T.JUNIT),
    _fw(F.SWIFTUI, "SwiftUI", L.SWIFT, (A.MOBILE,), B.XCODEBUILD, T.XCTEST),
    _fw(F.JETPACK_COMPOSE, "Jetpack Compose", L.KOTLIN, (A.MOBILE,), B.GRADLE, T.JUNIT),
    # Game
    _fw(F.PHASER, "Phaser", L.TYPESCRIPT, (A.GAME,), B.VITE, T.VITEST),
    _fw(F.PIXIJS, "PixiJS", L.TYPESCRIPT, (A.GAME,), B.VITE, T.VITEST),
    _fw(F.UNITY, "Unity", L.CSHARP, (A.GAME,), B.MSBUILD, T.NUNIT),
    _fw(F.GODOT_MONO, "Godot (C#)", L.CSHARP, (A.GAME,), B.MSBUILD, T.NUNIT),
    _fw(F.SDL2, "SDL2", L.CPP, (A.GAME,), B.CMAKE, T.CATCH2),
    _fw(F.SFML, "SFML", L.CPP, (A.GAME,), B.CMAKE, T.GTEST),
    _fw(F.BEVY, "Bevy", L.RUST, (A.GAME,), B.CARGO, T.RUST_TEST),
    _fw(F.MACROQUAD, "Macroquad", L.RUST, (A.GAME,), B.CARGO, T.RUST_TEST),
)

FRAMEWORK_MAP: dict[str, FrameworkEntry] = {entry.id: entry for entry in FRAMEWORKS}

# Framework families whose code is equally at home in either listed language.
LANGUAGE_EQUIVALENT_FRAMEWORKS: dict[str, tuple[str, ...]] = {
    **{
        fw: ("typescript", "javascript")
        for fw in (
            "express", "fastify", "nestjs", "commander", "yargs", "react", "vue",
            "svelte", "solid", "angular", "qwik", "nextjs", "nuxt", "sveltekit",
            "react-native", "electron", "phaser", "pixijs",
        )
    },
    "spring-boot": ("java", "kotlin"),
    "flutter": ("java", "kotlin"),
}

# Build tools and test runners native to each language.  ``none`` frameworks
# (libraries) draw their tooling from here.
LANGUAGE_BUILD_TOOLS: dict[str, tuple[str, ...]] = {
    "typescript": ("tsup", "vite", "esbuild", "webpack"),
    "javascript": ("esbuild", "vite", "webpack", "tsup"),
    "python": ("make",),
    "go": ("make",),
    "rust": ("cargo",),
    "java": ("gradle", "maven"),
    "kotlin": ("gradle", "maven"),
    "csharp": ("msbuild",),
    "cpp": ("cmake", "make"),
    "swift": ("xcodebuild", "make"),
    "php": ("make",),
    "ruby": ("make",),
}

LANGUAGE_TEST_FRAMEWORKS: dict[str, tuple[str, ...]] = {
    "typescript": ("vitest", "jest", "mocha"),
    "javascript": ("vitest", "jest", "mocha"),
    "python": ("pytest",),
    "go": ("go-test",),
    "rust": ("rust-test",),
    "java": ("junit",),
    "kotlin": ("junit",),
    "csharp": ("xunit", "nunit"),
    "cpp": ("gtest", "catch2"),
    "swift": ("xctest",),
    "php": ("phpunit",),
    "ruby": ("rspec",),
}


def framework_languages(framework: str) -> tuple[str, ...]:
    """Languages a framework may be written in, honouring equivalences."""
    if framework in LANGUAGE_EQUIVALENT_FRAMEWORKS:
        return LANGUAGE_EQUIVALENT_FRAMEWORKS[framework]
    entry = FRAMEWORK_MAP.get(framework)
    return (entry.language,) if entry else ()


def get_frameworks_by_archetype(archetype: str) -> list[FrameworkEntry]:
    return [fw for fw in FRAMEWORKS if archetype in fw.archetypes]


def get_frameworks_by_language(language: str) -> list[FrameworkEntry]:
    return [fw for fw in FRAMEWORKS if language in framework_languages(fw.id)]


def get_compatible_frameworks(archetype: str, language: str) -> list[FrameworkEntry]:
    """Frameworks that serve *archetype* and can be written in *language*."""
    return [
        fw
        for fw in FRAMEWORKS
        if archetype in fw.archetypes and language in framework_languages(fw.id)
    ]


def get_default_build_tool(framework: str) -> str:
    entry = FRAMEWORK_MAP.get(framework)
    return entry.default_build_tool if entry else "make"


def get_default_testing(framework: str) -> str:
    entry = FRAMEWORK_MAP.get(framework)
    return entry.default_testing if entry else "vitest"


def get_framework_name(framework: str) -> str:
    entry = FRAMEWORK_MAP.get(framework)
    return entry.name if entry else framework
