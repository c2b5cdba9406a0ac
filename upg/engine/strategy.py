"""Strategy contract and the priority-ordered pipeline shared by both passes.

A strategy is a predicate-gated unit of file-map mutation.  The pipeline
owns an instance-scoped list of strategies (no module-level registry),
runs the matching ones one at a time in priority order, and hands each the
pass's context.  ``context.files`` is a single-owner arena: exactly one
strategy writes to it at a time, and the last writer of a path wins.
"""

from __future__ import annotations

import abc
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from upg.engine.rng import RNGFacade
from upg.errors import tag_strategy_failure
from upg.models import EnrichmentFlags, FileMap, GeneratedProject, TechStack

if TYPE_CHECKING:
    from upg.enrichment.engine.introspector import ProjectIntrospector

logger = logging.getLogger(__name__)


@dataclass
class GenerationContext:
    """What a Pass 1 strategy sees."""

    stack: TechStack
    files: FileMap
    project_name: str
    rng: RNGFacade


@dataclass
class EnrichmentContext:
    """What a Pass 2 strategy sees.

    ``introspect`` is bound to ``source_project.files``, so queries always
    reflect Pass 1 output even while ``files`` (the copy) is being written.
    """

    source_project: GeneratedProject
    files: FileMap
    stack: TechStack
    project_name: str
    flags: EnrichmentFlags
    introspect: ProjectIntrospector
    rng: RNGFacade


class Strategy(abc.ABC):
    """Base class for pipeline strategies.

    Subclasses usually set ``id``, ``name`` and ``priority`` as class
    attributes.  Lower priorities run first; ties keep registration order.
    Any randomness must come from ``context.rng``.
    """

    priority: int = 0

    @property
    @abc.abstractmethod
    def id(self) -> str:
        """Stable identifier recorded in project metadata."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-readable name."""

    @abc.abstractmethod
    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        """Return ``True`` if this strategy applies to *stack*."""

    @abc.abstractmethod
    async def apply(self, context: Any) -> None:
        """Mutate ``context.files``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} priority={self.priority}>"


class GenerationStrategy(Strategy):
    """A Pass 1 strategy.  ``flags`` is always ``None`` during assembly."""

    @abc.abstractmethod
    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        """Return ``True`` if this strategy applies to *stack*."""

    @abc.abstractmethod
    async def apply(self, context: GenerationContext) -> None:
        """Write files into ``context.files``."""


class EnrichmentStrategy(Strategy):
    """A Pass 2 strategy, gated on the stack and the enrichment flags."""

    @abc.abstractmethod
    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        """Return ``True`` if this strategy applies."""

    @abc.abstractmethod
    async def apply(self, context: EnrichmentContext) -> None:
        """Write files into ``context.files``; never into the source project."""


def _priority(strategy: Strategy) -> int:
    return getattr(strategy, "priority", 0) or 0


class StrategyPipeline:
    """Priority-sorted strategy list evaluated against one shared file map.

    Parameters
    ----------
    strategies:
        Initial strategies, registered in iteration order.
    """

    def __init__(self, strategies: Iterable[Strategy] = ()) -> None:
        self._strategies: list[Strategy] = []
        self.register_all(strategies)

    def register(self, strategy: Strategy) -> StrategyPipeline:
        """Add *strategy* and re-sort (stable) by priority."""
        self._strategies.append(strategy)
        self._strategies.sort(key=_priority)
        return self

    def register_all(self, strategies: Iterable[Strategy]) -> StrategyPipeline:
        for strategy in strategies:
            self.register(strategy)
        return self

    @property
    def strategies(self) -> list[Strategy]:
        """Registered strategies in execution order."""
        return list(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    async def run(
        self,
        stack: TechStack,
        flags: EnrichmentFlags | None,
        context: GenerationContext | EnrichmentContext,
    ) -> list[str]:
        """Apply every matching strategy in order; return the applied ids.

        Each strategy is awaited to completion before the next starts.  An
        exception from ``matches`` or ``apply`` aborts the run: it is logged,
        tagged with the strategy id and re-raised unchanged.
        """
        applied: list[str] = []
        for strategy in list(self._strategies):
            try:
                if not strategy.matches(stack, flags):
                    continue
                logger.debug("Applying strategy %s (priority %d)", strategy.id, _priority(strategy))
                result = strategy.apply(context)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error("Strategy %s failed: %s", strategy.id, exc)
                tag_strategy_failure(exc, strategy.id)
                raise
            applied.append(strategy.id)
        return applied
