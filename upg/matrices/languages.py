"""Language matrix: runtimes, package managers and file conventions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from upg.matrices.dimensions import Language, Runtime


class LanguageEntry(BaseModel):
    """Static facts about one supported language."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: Language
    name: str
    runtimes: tuple[Runtime, ...]
    package_managers: tuple[str, ...] = ()
    file_extensions: tuple[str, ...] = ()
    config_files: tuple[str, ...] = ()


LANGUAGES: tuple[LanguageEntry, ...] = (
    LanguageEntry(
        id=Language.TYPESCRIPT,
        name="TypeScript",
        runtimes=(Runtime.NODE, Runtime.DENO, Runtime.BUN, Runtime.BROWSER),
        package_managers=("npm", "pnpm", "yarn", "bun"),
        file_extensions=(".ts", ".tsx", ".mts", ".cts"),
        config_files=("tsconfig.json", "package.json"),
    ),
    LanguageEntry(
        id=Language.JAVASCRIPT,
        name="JavaScript",
        runtimes=(Runtime.NODE, Runtime.DENO, Runtime.BUN, Runtime.BROWSER),
        package_managers=("npm", "pnpm", "yarn", "bun"),
        file_extensions=(".js", ".jsx", ".mjs", ".cjs"),
        config_files=("package.json",),
    ),
    LanguageEntry(
        id=Language.PYTHON,
        name="Python",
        runtimes=(Runtime.NATIVE,),
        package_managers=("pip", "poetry", "uv", "pipenv"),
        file_extensions=(".py", ".pyi"),
        config_files=("pyproject.toml", "requirements.txt", "setup.py"),
    ),
    LanguageEntry(
        id=Language.GO,
        name="Go",
        runtimes=(Runtime.NATIVE,),
        package_managers=("go mod",),
        file_extensions=(".go",),
        config_files=("go.mod", "go.sum"),
    ),
    LanguageEntry(
        id=Language.RUST,
        name="Rust",
        runtimes=(Runtime.NATIVE,),
        package_managers=("cargo",),
        file_extensions=(".rs",),
        config_files=("Cargo.toml", "Cargo.lock"),
    ),
    LanguageEntry(
        id=Language.JAVA,
        name="Java",
        runtimes=(Runtime.JVM,),
        package_managers=("maven", "gradle"),
        file_extensions=(".java",),
        config_files=("pom.xml", "build.gradle", "build.gradle.kts"),
    ),
    LanguageEntry(
        id=Language.KOTLIN,
        name="Kotlin",
        runtimes=(Runtime.JVM, Runtime.NATIVE),
        package_managers=("gradle", "maven"),
        file_extensions=(".kt", ".kts"),
        config_files=("build.gradle.kts", "build.gradle"),
    ),
    LanguageEntry(
        id=Language.CSHARP,
        name="C#",
        runtimes=(Runtime.DOTNET,),
        package_managers=("nuget", "dotnet"),
        file_extensions=(".cs",),
        config_files=(".csproj", ".sln"),
    ),
    LanguageEntry(
        id=Language.CPP,
        name="C++",
        runtimes=(Runtime.NATIVE,),
        package_managers=("conan", "vcpkg", "cmake"),
        file_extensions=(".cpp", ".hpp", ".cc", ".h"),
        config_files=("CMakeLists.txt", "conanfile.txt"),
    ),
    LanguageEntry(
        id=Language.SWIFT,
        name="Swift",
        runtimes=(Runtime.NATIVE,),
        package_managers=("swift package manager",),
        file_extensions=(".swift",),
        config_files=("Package.swift",),
    ),
    LanguageEntry(
        id=Language.PHP,
        name="PHP",
        runtimes=(Runtime.NATIVE,),
        package_managers=("composer",),
        file_extensions=(".php",),
        config_files=("composer.json",),
    ),
    LanguageEntry(
        id=Language.RUBY,
        name="Ruby",
        runtimes=(Runtime.NATIVE,),
        package_managers=("bundler", "gem"),
        file_extensions=(".rb",),
        config_files=("Gemfile", ".ruby-version"),
    ),
)

LANGUAGE_MAP: dict[str, LanguageEntry] = {entry.id: entry for entry in LANGUAGES}

NODE_LANGUAGES: tuple[str, ...] = ("typescript", "javascript")
JVM_LANGUAGES: tuple[str, ...] = ("java", "kotlin")
NATIVE_LANGUAGES: tuple[str, ...] = ("go", "rust", "cpp", "swift")


def get_runtimes_for_language(language: str) -> tuple[str, ...]:
    entry = LANGUAGE_MAP.get(language)
    return entry.runtimes if entry else ()


def language_supports_runtime(language: str, runtime: str) -> bool:
    return runtime in get_runtimes_for_language(language)


def get_primary_extension(language: str) -> str:
    entry = LANGUAGE_MAP.get(language)
    return entry.file_extensions[0] if entry and entry.file_extensions else ".txt"


def get_language_name(language: str) -> str:
    """Return the display name, falling back to the identifier."""
    entry = LANGUAGE_MAP.get(language)
    return entry.name if entry else language
