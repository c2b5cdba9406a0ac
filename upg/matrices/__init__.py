"""Universal matrix: the data the resolver reasons over."""

from upg.matrices.archetypes import (
    ARCHETYPE_MAP,
    ARCHETYPES,
    FRAMEWORKLESS_ARCHETYPES,
    ArchetypeEntry,
    get_archetype_name,
    get_languages_for_archetype,
    is_language_compatible,
)
from upg.matrices.databases import (
    DATABASE_MAP,
    DATABASES,
    ORM_LANGUAGE_MAP,
    DatabaseEntry,
    get_compatible_orms,
    get_database_kind,
    get_database_name,
    get_default_port,
    get_orms_for_stack,
    is_orm_compatible,
    orm_supports_language,
)
from upg.matrices.dimensions import (
    CICD,
    DIMENSION_ENUMS,
    DIMENSIONS,
    ORM,
    Archetype,
    BuildTool,
    Database,
    Framework,
    Language,
    Packaging,
    Runtime,
    Styling,
    TestingFramework,
    Transport,
    domain_of,
)
from upg.matrices.frameworks import (
    FRAMEWORK_MAP,
    FRAMEWORKS,
    LANGUAGE_BUILD_TOOLS,
    LANGUAGE_EQUIVALENT_FRAMEWORKS,
    LANGUAGE_TEST_FRAMEWORKS,
    FrameworkEntry,
    framework_languages,
    get_compatible_frameworks,
    get_default_build_tool,
    get_default_testing,
    get_framework_name,
    get_frameworks_by_archetype,
    get_frameworks_by_language,
)
from upg.matrices.languages import (
    LANGUAGE_MAP,
    LANGUAGES,
    LanguageEntry,
    get_language_name,
    get_primary_extension,
    get_runtimes_for_language,
    language_supports_runtime,
)

__all__ = [
    # Dimensions
    "Archetype",
    "BuildTool",
    "CICD",
    "DIMENSIONS",
    "DIMENSION_ENUMS",
    "Database",
    "Framework",
    "Language",
    "ORM",
    "Packaging",
    "Runtime",
    "Styling",
    "TestingFramework",
    "Transport",
    "domain_of",
    # Languages
    "LANGUAGES",
    "LANGUAGE_MAP",
    "LanguageEntry",
    "get_language_name",
    "get_primary_extension",
    "get_runtimes_for_language",
    "language_supports_runtime",
    # Frameworks
    "FRAMEWORKS",
    "FRAMEWORK_MAP",
    "FrameworkEntry",
    "LANGUAGE_BUILD_TOOLS",
    "LANGUAGE_EQUIVALENT_FRAMEWORKS",
    "LANGUAGE_TEST_FRAMEWORKS",
    "framework_languages",
    "get_compatible_frameworks",
    "get_default_build_tool",
    "get_default_testing",
    "get_framework_name",
    "get_frameworks_by_archetype",
    "get_frameworks_by_language",
    # Databases
    "DATABASES",
    "DATABASE_MAP",
    "DatabaseEntry",
    "ORM_LANGUAGE_MAP",
    "get_compatible_orms",
    "get_database_kind",
    "get_database_name",
    "get_default_port",
    "get_orms_for_stack",
    "is_orm_compatible",
    "orm_supports_language",
    # Archetypes
    "ARCHETYPES",
    "ARCHETYPE_MAP",
    "ArchetypeEntry",
    "FRAMEWORKLESS_ARCHETYPES",
    "get_archetype_name",
    "get_languages_for_archetype",
    "is_language_compatible",
]
