"""Closed value domains for the twelve stack dimensions."""

from __future__ import annotations

from enum import Enum


class Archetype(str, Enum):
    WEB = "web"
    BACKEND = "backend"
    CLI = "cli"
    MOBILE = "mobile"
    DESKTOP = "desktop"
    LIBRARY = "library"
    GAME = "game"


class Language(str, Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    JAVA = "java"
    KOTLIN = "kotlin"
    CSHARP = "csharp"
    CPP = "cpp"
    SWIFT = "swift"
    PHP = "php"
    RUBY = "ruby"


class Runtime(str, Enum):
    NODE = "node"
    DENO = "deno"
    BUN = "bun"
    JVM = "jvm"
    DOTNET = "dotnet"
    NATIVE = "native"
    BROWSER = "browser"


class Framework(str, Enum):
    # Web
    REACT = "react"
    VUE = "vue"
    SVELTE = "svelte"
    SOLID = "solid"
    ANGULAR = "angular"
    QWIK = "qwik"
    NEXTJS = "nextjs"
    NUXT = "nuxt"
    SVELTEKIT = "sveltekit"
    # Backend
    EXPRESS = "express"
    FASTIFY = "fastify"
    NESTJS = "nestjs"
    FASTAPI = "fastapi"
    FLASK = "flask"
    DJANGO = "django"
    GIN = "gin"
    ECHO = "echo"
    AXUM = "axum"
    ACTIX = "actix"
    SPRING_BOOT = "spring-boot"
    ASPNET_CORE = "aspnet-core"
    RAILS = "rails"
    LARAVEL = "laravel"
    # CLI
    COMMANDER = "commander"
    YARGS = "yargs"
    CLAP = "clap"
    COBRA = "cobra"
    CLICK = "click"
    ARGPARSE = "argparse"
    # Desktop
    TAURI = "tauri"
    ELECTRON = "electron"
    QT = "qt"
    # Mobile
    REACT_NATIVE = "react-native"
    FLUTTER = "flutter"
    SWIFTUI = "swiftui"
    JETPACK_COMPOSE = "jetpack-compose"
    # Game
    PHASER = "phaser"
    PIXIJS = "pixijs"
    UNITY = "unity"
    GODOT_MONO = "godot-mono"
    SDL2 = "sdl2"
    SFML = "sfml"
    BEVY = "bevy"
    MACROQUAD = "macroquad"
    # Libraries carry no framework
    NONE = "none"


class Database(str, Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    MONGODB = "mongodb"
    REDIS = "redis"
    CASSANDRA = "cassandra"
    NEO4J = "neo4j"
    NONE = "none"


class ORM(str, Enum):
    PRISMA = "prisma"
    DRIZZLE = "drizzle"
    TYPEORM = "typeorm"
    SEQUELIZE = "sequelize"
    SQLALCHEMY = "sqlalchemy"
    GORM = "gorm"
    DIESEL = "diesel"
    ENTITY_FRAMEWORK = "entity-framework"
    ACTIVERECORD = "activerecord"
    ELOQUENT = "eloquent"
    NONE = "none"


class Transport(str, Enum):
    REST = "rest"
    GRAPHQL = "graphql"
    GRPC = "grpc"
    TRPC = "trpc"
    WEBSOCKET = "websocket"


class Packaging(str, Enum):
    DOCKER = "docker"
    PODMAN = "podman"
    NIX = "nix"
    NONE = "none"


class CICD(str, Enum):
    GITHUB_ACTIONS = "github-actions"
    GITLAB_CI = "gitlab-ci"
    CIRCLECI = "circleci"
    NONE = "none"


class BuildTool(str, Enum):
    VITE = "vite"
    WEBPACK = "webpack"
    ESBUILD = "esbuild"
    TSUP = "tsup"
    CARGO = "cargo"
    MAVEN = "maven"
    GRADLE = "gradle"
    MSBUILD = "msbuild"
    CMAKE = "cmake"
    MAKE = "make"
    XCODEBUILD = "xcodebuild"


class Styling(str, Enum):
    TAILWIND = "tailwind"
    CSS_MODULES = "css-modules"
    STYLED_COMPONENTS = "styled-components"
    SCSS = "scss"
    VANILLA = "vanilla"
    NONE = "none"


class TestingFramework(str, Enum):
    VITEST = "vitest"
    JEST = "jest"
    MOCHA = "mocha"
    PYTEST = "pytest"
    GO_TEST = "go-test"
    RUST_TEST = "rust-test"
    JUNIT = "junit"
    XUNIT = "xunit"
    RSPEC = "rspec"
    PHPUNIT = "phpunit"
    XCTEST = "xctest"
    CATCH2 = "catch2"
    GTEST = "gtest"
    FLUTTER_TEST = "flutter-test"
    NUNIT = "nunit"


# Declared resolution order; also the field order of a resolved stack.
DIMENSIONS: tuple[str, ...] = (
    "archetype",
    "language",
    "runtime",
    "framework",
    "database",
    "orm",
    "transport",
    "packaging",
    "cicd",
    "build_tool",
    "styling",
    "testing",
)

DIMENSION_ENUMS: dict[str, type[Enum]] = {
    "archetype": Archetype,
    "language": Language,
    "runtime": Runtime,
    "framework": Framework,
    "database": Database,
    "orm": ORM,
    "transport": Transport,
    "packaging": Packaging,
    "cicd": CICD,
    "build_tool": BuildTool,
    "styling": Styling,
    "testing": TestingFramework,
}


def domain_of(dimension: str) -> tuple[str, ...]:
    """Return every value of *dimension* in declaration order."""
    try:
        enum_cls = DIMENSION_ENUMS[dimension]
    except KeyError:
        raise ValueError(f"Unknown dimension: {dimension!r}") from None
    return tuple(member.value for member in enum_cls)
