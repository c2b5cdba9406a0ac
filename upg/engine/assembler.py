"""ProjectAssembler: Pass 1 of the pipeline.

Creates a complete project from a seed by resolving a stack and composing
files from the registered generation strategies.

Usage::

    from upg.engine.assembler import ProjectAssembler
    from upg.strategies import ALL_STRATEGIES

    assembler = ProjectAssembler(42, {"archetype": "cli", "language": "python"},
                                 strategies=ALL_STRATEGIES)
    project = await assembler.generate()
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Iterable

from upg.config import (
    DEFAULT_UPG_VERSION,
    MAX_SEED,
    MIN_SEED,
    PROJECT_NAME_ADJECTIVES,
    PROJECT_NAME_NOUNS,
)
from upg.engine.constraints import StackResolver
from upg.engine.rng import RNGFacade, SeededRNG
from upg.engine.seed import is_valid_seed, parse_seed
from upg.engine.strategy import GenerationContext, GenerationStrategy, StrategyPipeline
from upg.errors import InvalidSeed
from upg.models import GeneratedProject, GenerationMetadata, StackLike, TechStack

logger = logging.getLogger(__name__)


class ProjectAssembler:
    """Resolve a stack from *seed* and assemble its file tree.

    The stack is resolved in the constructor, so an impossible
    ``partial_stack`` raises :class:`~upg.errors.IncompatibleStack` before
    any strategy is registered or run.

    Parameters
    ----------
    seed:
        Sole source of randomness for the run.
    partial_stack:
        Dimensions pinned by the caller.  Everything else is resolved.
    project_name:
        Fixed project name; drawn from the random source when omitted.
    upg_version:
        Version stamped into the project metadata.
    strategies:
        Initial generation strategies.
    """

    def __init__(
        self,
        seed: int | str,
        partial_stack: StackLike = None,
        *,
        project_name: str | None = None,
        upg_version: str = DEFAULT_UPG_VERSION,
        strategies: Iterable[GenerationStrategy] = (),
    ) -> None:
        if isinstance(seed, str):
            seed = parse_seed(seed)
        elif not is_valid_seed(seed):
            raise InvalidSeed(f"Seed must be an integer in [{MIN_SEED}, {MAX_SEED}], got {seed!r}")
        self._rng = SeededRNG(seed)
        self._project_name = project_name
        self._upg_version = upg_version
        self._pipeline = StrategyPipeline(strategies)
        self._partial_stack = partial_stack
        self._stack = StackResolver(self._rng).resolve(partial_stack)

    @property
    def seed(self) -> int:
        return self._rng.seed

    @property
    def stack(self) -> TechStack:
        """The resolved stack."""
        return self._stack

    @property
    def rng(self) -> SeededRNG:
        """The run's random source.  Fork it before handing it to Pass 2."""
        return self._rng

    @property
    def strategies(self) -> list[GenerationStrategy]:
        return self._pipeline.strategies  # type: ignore[return-value]

    def register_strategy(self, strategy: GenerationStrategy) -> ProjectAssembler:
        self._pipeline.register(strategy)
        return self

    def register_strategies(self, strategies: Iterable[GenerationStrategy]) -> ProjectAssembler:
        self._pipeline.register_all(strategies)
        return self

    async def generate(self) -> GeneratedProject:
        """Run the pipeline and return the generated project.

        Strategy errors propagate unwrapped; see
        :func:`upg.errors.failed_strategy`.
        """
        start = time.perf_counter()
        # Replay from the seed so repeated calls produce identical projects.
        self._rng.reset()
        stack = StackResolver(self._rng).resolve(self._partial_stack)
        project_name = self._project_name or self._generate_project_name()

        files: dict[str, str] = {}
        context = GenerationContext(
            stack=stack,
            files=files,
            project_name=project_name,
            rng=RNGFacade(self._rng),
        )
        applied = await self._pipeline.run(stack, None, context)

        metadata = GenerationMetadata(
            generated_at=datetime.now(timezone.utc).isoformat(),
            upg_version=self._upg_version,
            duration_ms=(time.perf_counter() - start) * 1000,
            constraints_applied=applied,
        )
        project = GeneratedProject(
            id=f"{stack.language}-{stack.framework}-{self.seed}",
            seed=self.seed,
            name=project_name,
            stack=stack,
            files=files,
            metadata=metadata,
        )
        logger.info(
            "Generated project %s: %d files from %d strategies",
            project.id,
            len(project.files),
            len(applied),
        )
        return project

    def _generate_project_name(self) -> str:
        adjective = self._rng.pick(PROJECT_NAME_ADJECTIVES)
        noun = self._rng.pick(PROJECT_NAME_NOUNS)
        suffix = self._rng.string(4)
        return f"{adjective}-{noun}-{suffix}"


def create_assembler(
    seed: int,
    partial_stack: StackLike = None,
    **options,
) -> ProjectAssembler:
    """Create a :class:`ProjectAssembler`; *options* are its keyword arguments."""
    return ProjectAssembler(seed, partial_stack, **options)


async def generate_project(
    seed: int,
    strategies: Iterable[GenerationStrategy],
    partial_stack: StackLike = None,
    **options,
) -> GeneratedProject:
    """One-shot generation for *seed* with *strategies*."""
    assembler = create_assembler(seed, partial_stack, strategies=strategies, **options)
    return await assembler.generate()
