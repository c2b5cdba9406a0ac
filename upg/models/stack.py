"""Stack records: the resolved twelve-dimension tuple and its partial form."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

from upg.matrices.dimensions import (
    CICD,
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
)


class TechStack(BaseModel):
    """A fully resolved stack.  Immutable once created."""

    model_config = ConfigDict(frozen=True, use_enum_values=True, extra="forbid")

    archetype: Archetype
    language: Language
    runtime: Runtime
    framework: Framework
    database: Database
    orm: ORM
    transport: Transport
    packaging: Packaging
    cicd: CICD
    build_tool: BuildTool
    styling: Styling
    testing: TestingFramework

    def as_dict(self) -> dict[str, str]:
        """Dimension values in declared resolution order."""
        return {dim: getattr(self, dim) for dim in DIMENSIONS}


class PartialStack(BaseModel):
    """Any subset of the twelve dimensions, as pinned by a caller."""

    model_config = ConfigDict(frozen=True, use_enum_values=True, extra="forbid")

    archetype: Archetype | None = None
    language: Language | None = None
    runtime: Runtime | None = None
    framework: Framework | None = None
    database: Database | None = None
    orm: ORM | None = None
    transport: Transport | None = None
    packaging: Packaging | None = None
    cicd: CICD | None = None
    build_tool: BuildTool | None = None
    styling: Styling | None = None
    testing: TestingFramework | None = None

    def pinned(self) -> dict[str, str]:
        """Only the dimensions that carry a value, in declared order."""
        return {dim: value for dim in DIMENSIONS if (value := getattr(self, dim)) is not None}


StackLike = PartialStack | TechStack | Mapping[str, Any] | None


def coerce_partial(stack: StackLike) -> PartialStack:
    """Normalise *stack* into a validated :class:`PartialStack`.

    Mappings are validated against the dimension enums; ``None`` values and
    a ``None`` argument mean "unpinned".
    """
    if stack is None:
        return PartialStack()
    if isinstance(stack, PartialStack):
        return stack
    if isinstance(stack, TechStack):
        return PartialStack(**stack.as_dict())
    return PartialStack.model_validate({k: v for k, v in stack.items() if v is not None})
