"""Error taxonomy for the generation pipeline.

Random-source errors signal programmer misuse.  ``IncompatibleStack`` is
the resolver's user-facing failure and always carries every violated rule.
Strategy failures are not wrapped: the original exception propagates with a
``strategy_id`` tag attached by the pipeline (see :func:`tag_strategy_failure`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from upg.engine.constraints import Violation

STRATEGY_ID_ATTR = "strategy_id"


class UPGError(Exception):
    """Base class for all errors raised by the generator."""


# -- Random source -----------------------------------------------------------


class RandomSourceError(UPGError, ValueError):
    """Raised when the random source is asked for an impossible draw."""


class EmptyDomain(RandomSourceError):
    """Raised when picking from an empty sequence."""


class DomainExhausted(RandomSourceError):
    """Raised when more unique items are requested than exist."""


class ZeroWeight(RandomSourceError):
    """Raised when a weighted pick has no items or a total weight of zero."""


class InvalidSeed(UPGError, ValueError):
    """Raised when a seed is not a positive safe integer."""


# -- Resolver ------------------------------------------------------------------


class IncompatibleStack(UPGError):
    """Raised when no rule-satisfying stack completion exists.

    Attributes
    ----------
    violations:
        Every violated rule, not just the first.
    dimensions:
        Sorted names of the dimensions involved in the conflict.
    suggestions:
        Human-readable hints for adjusting the request.
    """

    def __init__(
        self,
        violations: Iterable[Violation],
        *,
        suggestions: Iterable[str] = (),
        message: str | None = None,
    ) -> None:
        self.violations = list(violations)
        dims: set[str] = set()
        for v in self.violations:
            dims.update(v.dimensions)
        self.dimensions: tuple[str, ...] = tuple(sorted(dims))
        self.suggestions = list(suggestions)
        if message is None:
            message = _format_incompatible(self.violations, self.suggestions)
        super().__init__(message)


def _format_incompatible(violations: list[Violation], suggestions: list[str]) -> str:
    if not violations:
        return "Incompatible stack"
    lines = [f"Incompatible stack ({len(violations)} violation(s)):"]
    lines.extend(f"  - {v.message}" for v in violations)
    if suggestions:
        lines.append("Suggestions:")
        lines.extend(f"  - {s}" for s in suggestions)
    return "\n".join(lines)


# -- Strategy failures ---------------------------------------------------------


def tag_strategy_failure(exc: BaseException, strategy_id: str) -> BaseException:
    """Attach the executing strategy id to *exc* without changing its type."""
    try:
        setattr(exc, STRATEGY_ID_ATTR, strategy_id)
    except AttributeError:
        # Some builtins reject new attributes; the note below still applies.
        pass
    exc.add_note(f"while applying strategy '{strategy_id}'")
    return exc


def failed_strategy(exc: BaseException) -> str | None:
    """Return the id of the strategy that raised *exc*, if it was tagged."""
    return getattr(exc, STRATEGY_ID_ATTR, None)
