"""Database matrix with ORM compatibility."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from upg.matrices.dimensions import ORM, Database

_ALL_SQL_ORMS: tuple[ORM, ...] = (
    ORM.PRISMA,
    ORM.DRIZZLE,
    ORM.TYPEORM,
    ORM.SEQUELIZE,
    ORM.SQLALCHEMY,
    ORM.GORM,
    ORM.DIESEL,
    ORM.ENTITY_FRAMEWORK,
    ORM.ACTIVERECORD,
    ORM.ELOQUENT,
)


class DatabaseEntry(BaseModel):
    """Static facts about one database engine."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: Database
    name: str
    kind: Literal["sql", "document", "key-value", "graph"]
    default_port: int
    compatible_orms: tuple[ORM, ...]


DATABASES: tuple[DatabaseEntry, ...] = (
    DatabaseEntry(id=Database.POSTGRES, name="PostgreSQL", kind="sql", default_port=5432, compatible_orms=_ALL_SQL_ORMS),
    DatabaseEntry(id=Database.MYSQL, name="MySQL", kind="sql", default_port=3306, compatible_orms=_ALL_SQL_ORMS),
    DatabaseEntry(id=Database.SQLITE, name="SQLite", kind="sql", default_port=0, compatible_orms=_ALL_SQL_ORMS),
    DatabaseEntry(
        id=Database.MONGODB,
        name="MongoDB",
        kind="document",
        default_port=27017,
        compatible_orms=(ORM.PRISMA, ORM.TYPEORM),
    ),
    DatabaseEntry(id=Database.REDIS, name="Redis", kind="key-value", default_port=6379, compatible_orms=()),
    DatabaseEntry(id=Database.CASSANDRA, name="Cassandra", kind="key-value", default_port=9042, compatible_orms=()),
    DatabaseEntry(id=Database.NEO4J, name="Neo4j", kind="graph", default_port=7687, compatible_orms=()),
    DatabaseEntry(id=Database.NONE, name="No Database", kind="sql", default_port=0, compatible_orms=(ORM.NONE,)),
)

DATABASE_MAP: dict[str, DatabaseEntry] = {entry.id: entry for entry in DATABASES}

SQL_DATABASES: tuple[str, ...] = ("postgres", "mysql", "sqlite")
NOSQL_DATABASES: tuple[str, ...] = ("mongodb", "redis", "cassandra", "neo4j")

# Languages each ORM is available in.  ``none`` works everywhere.
ORM_LANGUAGE_MAP: dict[str, tuple[str, ...]] = {
    "prisma": ("typescript", "javascript"),
    "drizzle": ("typescript", "javascript"),
    "typeorm": ("typescript",),
    "sequelize": ("typescript", "javascript"),
    "sqlalchemy": ("python",),
    "gorm": ("go",),
    "diesel": ("rust",),
    "entity-framework": ("csharp",),
    "activerecord": ("ruby",),
    "eloquent": ("php",),
    "none": (),
}


def get_compatible_orms(database: str) -> tuple[str, ...]:
    entry = DATABASE_MAP.get(database)
    return entry.compatible_orms if entry else ()


def orm_supports_language(orm: str, language: str) -> bool:
    languages = ORM_LANGUAGE_MAP.get(orm, ())
    return not languages or language in languages


def get_orms_for_stack(database: str, language: str) -> list[str]:
    """ORMs usable with both *database* and *language*."""
    return [orm for orm in get_compatible_orms(database) if orm_supports_language(orm, language)]


def is_orm_compatible(orm: str, database: str) -> bool:
    return orm in get_compatible_orms(database)


def get_default_port(database: str) -> int:
    entry = DATABASE_MAP.get(database)
    return entry.default_port if entry else 0


def get_database_name(database: str) -> str:
    entry = DATABASE_MAP.get(database)
    return entry.name if entry else database


def get_database_kind(database: str) -> str:
    entry = DATABASE_MAP.get(database)
    return entry.kind if entry else "sql"
