"""Tests for the strategy contract and the priority-ordered pipeline."""

from __future__ import annotations

import pytest

from upg.engine.rng import RNGFacade, SeededRNG
from upg.engine.strategy import GenerationContext, GenerationStrategy, StrategyPipeline
from upg.errors import STRATEGY_ID_ATTR, failed_strategy
from upg.models import TechStack

STACK = TechStack(
    archetype="cli",
    language="python",
    runtime="native",
    framework="click",
    database="none",
    orm="none",
    transport="rest",
    packaging="none",
    cicd="none",
    build_tool="make",
    styling="none",
    testing="pytest",
)


class RecordingStrategy(GenerationStrategy):
    """Writes its id to the shared log and to a file named after itself."""

    name = "Recording"

    def __init__(self, sid: str, priority: int, log: list[str], *, language: str | None = None):
        self._id = sid
        self.priority = priority
        self._log = log
        self._language = language

    @property
    def id(self) -> str:
        return self._id

    def matches(self, stack, flags=None):
        return self._language is None or stack.language == self._language

    async def apply(self, context):
        self._log.append(self._id)
        context.files[f"{self._id}.txt"] = self._id


class BrokenStrategy(GenerationStrategy):
    id = "broken"
    name = "Broken"
    priority = 50

    def matches(self, stack, flags=None):
        return True

    async def apply(self, context):
        raise RuntimeError("template exploded")


class SyncStrategy(GenerationStrategy):
    id = "sync"
    name = "Synchronous apply"
    priority = 0

    def matches(self, stack, flags=None):
        return True

    def apply(self, context):  # type: ignore[override]
        context.files["sync.txt"] = "ok"


def _context(files: dict[str, str] | None = None) -> GenerationContext:
    return GenerationContext(
        stack=STACK,
        files=files if files is not None else {},
        project_name="demo",
        rng=RNGFacade(SeededRNG(1)),
    )


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class TestOrdering:
    def test_sorted_by_priority(self):
        log: list[str] = []
        pipeline = StrategyPipeline([
            RecordingStrategy("c", 30, log),
            RecordingStrategy("a", 10, log),
            RecordingStrategy("b", 20, log),
        ])
        assert [s.id for s in pipeline.strategies] == ["a", "b", "c"]

    def test_ties_keep_registration_order(self):
        log: list[str] = []
        pipeline = StrategyPipeline()
        pipeline.register(RecordingStrategy("first", 5, log))
        pipeline.register(RecordingStrategy("second", 5, log))
        pipeline.register(RecordingStrategy("early", 1, log))
        assert [s.id for s in pipeline.strategies] == ["early", "first", "second"]

    def test_register_returns_pipeline(self):
        pipeline = StrategyPipeline()
        assert pipeline.register(RecordingStrategy("x", 0, [])) is pipeline
        assert len(pipeline) == 1

    def test_strategies_is_a_copy(self):
        pipeline = StrategyPipeline([RecordingStrategy("x", 0, [])])
        pipeline.strategies.clear()
        assert len(pipeline) == 1


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

class TestRun:
    @pytest.mark.asyncio
    async def test_runs_in_priority_order(self):
        log: list[str] = []
        pipeline = StrategyPipeline([
            RecordingStrategy("p30", 30, log),
            RecordingStrategy("p10", 10, log),
            RecordingStrategy("p20", 20, log),
        ])
        applied = await pipeline.run(STACK, None, _context())
        assert log == ["p10", "p20", "p30"]
        assert applied == ["p10", "p20", "p30"]

    @pytest.mark.asyncio
    async def test_non_matching_skipped(self):
        log: list[str] = []
        pipeline = StrategyPipeline([
            RecordingStrategy("py", 0, log, language="python"),
            RecordingStrategy("go", 0, log, language="go"),
        ])
        context = _context()
        applied = await pipeline.run(STACK, None, context)
        assert applied == ["py"]
        assert "go.txt" not in context.files

    @pytest.mark.asyncio
    async def test_last_writer_wins(self):
        class Overwrite(GenerationStrategy):
            id = "overwrite"
            name = "Overwrite"
            priority = 99

            def matches(self, stack, flags=None):
                return True

            async def apply(self, context):
                context.files["early.txt"] = "replaced"

        pipeline = StrategyPipeline([Overwrite(), RecordingStrategy("early", 1, [])])
        context = _context()
        await pipeline.run(STACK, None, context)
        assert context.files["early.txt"] == "replaced"

    @pytest.mark.asyncio
    async def test_sync_apply_supported(self):
        context = _context()
        applied = await StrategyPipeline([SyncStrategy()]).run(STACK, None, context)
        assert applied == ["sync"]
        assert context.files["sync.txt"] == "ok"

    @pytest.mark.asyncio
    async def test_empty_pipeline(self):
        context = _context()
        assert await StrategyPipeline().run(STACK, None, context) == []
        assert context.files == {}


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    @pytest.mark.asyncio
    async def test_failure_is_tagged_and_reraised(self):
        log: list[str] = []
        pipeline = StrategyPipeline([
            RecordingStrategy("before", 10, log),
            BrokenStrategy(),
            RecordingStrategy("after", 90, log),
        ])
        with pytest.raises(RuntimeError, match="template exploded") as exc_info:
            await pipeline.run(STACK, None, _context())
        assert failed_strategy(exc_info.value) == "broken"
        assert getattr(exc_info.value, STRATEGY_ID_ATTR) == "broken"
        assert log == ["before"]

    @pytest.mark.asyncio
    async def test_failure_carries_note(self):
        with pytest.raises(RuntimeError) as exc_info:
            await StrategyPipeline([BrokenStrategy()]).run(STACK, None, _context())
        assert any("broken" in note for note in exc_info.value.__notes__)

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, caplog):
        with caplog.at_level("ERROR", logger="upg.engine.strategy"):
            with pytest.raises(RuntimeError):
                await StrategyPipeline([BrokenStrategy()]).run(STACK, None, _context())
        assert "broken" in caplog.text

    def test_untagged_exception(self):
        assert failed_strategy(ValueError("plain")) is None
