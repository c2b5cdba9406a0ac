"""Stack constraint rules, validation and resolution.

Every rule in this module relates exactly two dimensions, so a stack is
valid exactly when every pair of its values is compatible.  The resolver
leans on that: it prunes each unpinned dimension's candidates against the
pinned values, keeps the remaining candidates arc-consistent, and only then
draws from the random source.  A draw can therefore never paint the
resolver into a corner.
"""

from __future__ import annotations

import functools
import logging
from collections import deque
from collections.abc import Mapping
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from upg.engine.rng import RNGFacade, SeededRNG
from upg.errors import IncompatibleStack
from upg.matrices import (
    DIMENSIONS,
    FRAMEWORK_MAP,
    FRAMEWORKLESS_ARCHETYPES,
    LANGUAGE_BUILD_TOOLS,
    LANGUAGE_EQUIVALENT_FRAMEWORKS,
    LANGUAGE_TEST_FRAMEWORKS,
    ORM_LANGUAGE_MAP,
    domain_of,
    framework_languages,
    get_compatible_frameworks,
    get_compatible_orms,
    get_languages_for_archetype,
    get_runtimes_for_language,
    is_language_compatible,
    language_supports_runtime,
    orm_supports_language,
)
from upg.models.stack import PartialStack, StackLike, TechStack, coerce_partial

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rule records
# ---------------------------------------------------------------------------


class IncompatibilityRule(BaseModel):
    """When every ``when`` value is present, none of ``incompatible`` may be."""

    model_config = ConfigDict(frozen=True)

    when: dict[str, str]
    incompatible: dict[str, tuple[str, ...]]
    reason: str


class RequirementRule(BaseModel):
    """When every ``when`` value is present, each ``requires`` value must be."""

    model_config = ConfigDict(frozen=True)

    when: dict[str, str]
    requires: dict[str, str]
    reason: str


class DefaultPairing(BaseModel):
    """Values preferred for other dimensions once ``key=value`` is pinned."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    defaults: dict[str, str]
    weight: int = 10


class Violation(BaseModel):
    """One violated rule."""

    model_config = ConfigDict(frozen=True)

    rule: str
    dimensions: tuple[str, ...]
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        return self.message


class ConstraintValidation(BaseModel):
    valid: bool
    violations: list[Violation] = Field(default_factory=list)
    applied_rules: list[str] = Field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


class ConstraintValidationResult(BaseModel):
    """Pre-generation feedback on a caller's archetype/language/framework."""

    valid: bool
    errors: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

_SQL_ORMS = (
    "prisma", "typeorm", "sequelize", "drizzle", "sqlalchemy",
    "gorm", "diesel", "entity-framework", "activerecord", "eloquent",
)


def _orms_except(*allowed: str) -> tuple[str, ...]:
    return tuple(orm for orm in _SQL_ORMS if orm not in allowed)


def _languages_except(*allowed: str) -> tuple[str, ...]:
    return tuple(lang for lang in domain_of("language") if lang not in allowed)


INCOMPATIBILITY_RULES: tuple[IncompatibilityRule, ...] = (
    # Language-specific ORMs
    IncompatibilityRule(when={"language": "go"}, incompatible={"orm": _orms_except("gorm")},
                        reason="Go uses GORM or raw SQL drivers"),
    IncompatibilityRule(when={"language": "rust"}, incompatible={"orm": _orms_except("diesel")},
                        reason="Rust uses Diesel or SQLx"),
    IncompatibilityRule(when={"language": "python"}, incompatible={"orm": _orms_except("sqlalchemy")},
                        reason="Python uses SQLAlchemy or Django ORM"),
    IncompatibilityRule(when={"language": "csharp"}, incompatible={"orm": _orms_except("entity-framework")},
                        reason="C# uses Entity Framework"),
    IncompatibilityRule(when={"language": "ruby"}, incompatible={"orm": _orms_except("activerecord")},
                        reason="Ruby uses ActiveRecord"),
    IncompatibilityRule(when={"language": "php"}, incompatible={"orm": _orms_except("eloquent")},
                        reason="PHP uses Eloquent or Doctrine"),
    # Web frontends
    IncompatibilityRule(
        when={"archetype": "web"},
        incompatible={"language": ("go", "rust", "java", "csharp", "cpp", "php", "ruby")},
        reason="Web frontends require JavaScript/TypeScript",
    ),
    # CLI tools
    IncompatibilityRule(
        when={"archetype": "cli"},
        incompatible={"database": ("cassandra", "neo4j")},
        reason="CLI tools rarely need distributed databases",
    ),
    # Platform-locked mobile frameworks
    IncompatibilityRule(when={"framework": "swiftui"}, incompatible={"language": _languages_except("swift")},
                        reason="SwiftUI requires Swift"),
    IncompatibilityRule(when={"framework": "jetpack-compose"}, incompatible={"language": _languages_except("kotlin")},
                        reason="Jetpack Compose requires Kotlin"),
)


def _requires(framework: str, language: str, reason: str) -> RequirementRule:
    return RequirementRule(when={"framework": framework}, requires={"language": language}, reason=reason)


REQUIREMENT_RULES: tuple[RequirementRule, ...] = (
    _requires("django", "python", "Django is a Python framework"),
    _requires("rails", "ruby", "Rails is a Ruby framework"),
    _requires("laravel", "php", "Laravel is a PHP framework"),
    # Kotlin is accepted through the JVM equivalence below.
    _requires("spring-boot", "java", "Spring Boot is a JVM framework (Java or Kotlin)"),
    _requires("aspnet-core", "csharp", "ASP.NET Core requires C#"),
    _requires("axum", "rust", "Axum is a Rust framework"),
    _requires("actix", "rust", "Actix is a Rust framework"),
    _requires("clap", "rust", "Clap is a Rust CLI library"),
    _requires("gin", "go", "Gin is a Go framework"),
    _requires("echo", "go", "Echo is a Go framework"),
    _requires("cobra", "go", "Cobra is a Go CLI library"),
    _requires("fastapi", "python", "FastAPI is a Python framework"),
    _requires("flask", "python", "Flask is a Python framework"),
    _requires("click", "python", "Click is a Python CLI library"),
    _requires("tauri", "rust", "Tauri backend is written in Rust"),
)


DEFAULT_PAIRINGS: tuple[DefaultPairing, ...] = (
    # Web
    DefaultPairing(key="framework", value="react", defaults={"build_tool": "vite", "styling": "tailwind", "testing": "vitest"}),
    DefaultPairing(key="framework", value="vue", defaults={"build_tool": "vite", "styling": "tailwind", "testing": "vitest"}),
    DefaultPairing(key="framework", value="svelte", defaults={"build_tool": "vite", "styling": "tailwind", "testing": "vitest"}),
    # Backend
    DefaultPairing(key="framework", value="express", defaults={"build_tool": "tsup", "testing": "vitest", "orm": "prisma"}),
    DefaultPairing(key="framework", value="fastapi", defaults={"orm": "sqlalchemy", "database": "postgres"}),
    DefaultPairing(key="framework", value="gin", defaults={"orm": "gorm", "database": "postgres"}),
    DefaultPairing(key="framework", value="axum", defaults={"orm": "diesel", "database": "postgres"}),
    DefaultPairing(key="framework", value="spring-boot", defaults={"build_tool": "gradle", "database": "postgres"}),
    # Languages
    DefaultPairing(key="language", value="rust", defaults={"build_tool": "cargo", "testing": "rust-test"}, weight=15),
    DefaultPairing(key="language", value="go", defaults={"build_tool": "make", "testing": "go-test"}, weight=15),
    DefaultPairing(key="language", value="typescript", defaults={"runtime": "node", "packaging": "docker"}),
)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _ordered(*dims: str) -> tuple[str, ...]:
    return tuple(d for d in DIMENSIONS if d in dims)


def _braced(values: Iterable[str]) -> str:
    return "{" + ", ".join(values) + "}"


def _values_of(stack: StackLike) -> dict[str, str]:
    return coerce_partial(stack).pinned()


def _languages_equivalent(current: str, required: str, framework: str | None) -> bool:
    if current == required:
        return True
    family = LANGUAGE_EQUIVALENT_FRAMEWORKS.get(framework or "")
    return family is not None and current in family and required in family


def _incompatibilities(values: Mapping[str, str]) -> list[Violation]:
    violations: list[Violation] = []
    for rule in INCOMPATIBILITY_RULES:
        if not all(values.get(k) == v for k, v in rule.when.items()):
            continue
        for key, banned in rule.incompatible.items():
            current = values.get(key)
            if current is None or current not in banned:
                continue
            when = ", ".join(f"{k}='{v}'" for k, v in rule.when.items())
            allowed = [v for v in domain_of(key) if v not in banned]
            violations.append(
                Violation(
                    rule=rule.reason,
                    dimensions=_ordered(key, *rule.when),
                    message=f"{rule.reason}: {key}='{current}' is incompatible with {when}",
                    suggestion=f"with {when}, choose {key} in {_braced(allowed)}",
                )
            )
    return violations


def _requirements(values: Mapping[str, str]) -> list[Violation]:
    violations: list[Violation] = []
    for rule in REQUIREMENT_RULES:
        if not all(values.get(k) == v for k, v in rule.when.items()):
            continue
        for key, required in rule.requires.items():
            current = values.get(key)
            if current is None:
                continue
            if key == "language":
                ok = _languages_equivalent(current, required, values.get("framework"))
                accepted = framework_languages(values.get("framework", "")) or (required,)
            else:
                ok = current == required
                accepted = (required,)
            if ok:
                continue
            subject = ", ".join(f"{v}" for v in rule.when.values())
            violations.append(
                Violation(
                    rule=rule.reason,
                    dimensions=_ordered(key, *rule.when),
                    message=f"{rule.reason}: requires {key}='{required}', got '{current}'",
                    suggestion=f"{subject} requires {key} in {_braced(accepted)}",
                )
            )
    return violations


def _structural(values: Mapping[str, str]) -> list[Violation]:
    violations: list[Violation] = []
    archetype = values.get("archetype")
    language = values.get("language")
    runtime = values.get("runtime")
    framework = values.get("framework")
    database = values.get("database")
    orm = values.get("orm")

    if archetype and language and not is_language_compatible(archetype, language):
        violations.append(
            Violation(
                rule="archetype-language",
                dimensions=("archetype", "language"),
                message=f"Language '{language}' is not compatible with archetype '{archetype}'",
                suggestion=f"{archetype} supports language in {_braced(get_languages_for_archetype(archetype))}",
            )
        )

    if language and runtime and not language_supports_runtime(language, runtime):
        violations.append(
            Violation(
                rule="language-runtime",
                dimensions=("language", "runtime"),
                message=f"Language '{language}' does not support runtime '{runtime}'",
                suggestion=f"{language} runs on runtime in {_braced(get_runtimes_for_language(language))}",
            )
        )

    if framework and framework != "none" and language:
        accepted = framework_languages(framework)
        if language not in accepted:
            violations.append(
                Violation(
                    rule="framework-language",
                    dimensions=("language", "framework"),
                    message=f"Framework '{framework}' requires language in {_braced(accepted)}, got '{language}'",
                    suggestion=f"{framework} requires language in {_braced(accepted)}",
                )
            )

    if framework and archetype:
        targets = _framework_archetypes(framework)
        if archetype not in targets:
            violations.append(
                Violation(
                    rule="framework-archetype",
                    dimensions=("archetype", "framework"),
                    message=f"Framework '{framework}' is for archetype in {_braced(targets)}, not '{archetype}'",
                    suggestion=f"{framework} requires archetype in {_braced(targets)}",
                )
            )

    if orm and orm != "none" and database and orm not in get_compatible_orms(database):
        supported = get_compatible_orms(database) or ("none",)
        violations.append(
            Violation(
                rule="orm-database",
                dimensions=("database", "orm"),
                message=f"ORM '{orm}' is not compatible with database '{database}'",
                suggestion=f"{database} supports orm in {_braced(supported)}",
            )
        )

    if orm and language and not orm_supports_language(orm, language):
        accepted = ORM_LANGUAGE_MAP.get(orm, ())
        violations.append(
            Violation(
                rule="orm-language",
                dimensions=("language", "orm"),
                message=f"ORM '{orm}' is not available for language '{language}'",
                suggestion=f"{orm} requires language in {_braced(accepted)}",
            )
        )

    return violations


def _framework_archetypes(framework: str) -> tuple[str, ...]:
    if framework == "none":
        return FRAMEWORKLESS_ARCHETYPES
    entry = FRAMEWORK_MAP.get(framework)
    return entry.archetypes if entry else ()


def _collect_violations(values: Mapping[str, str]) -> list[Violation]:
    return _incompatibilities(values) + _requirements(values) + _structural(values)


def check_incompatibilities(stack: StackLike) -> list[Violation]:
    """Violations of :data:`INCOMPATIBILITY_RULES` in *stack*."""
    return _incompatibilities(_values_of(stack))


def check_requirements(stack: StackLike) -> list[Violation]:
    """Violations of :data:`REQUIREMENT_RULES` in *stack*."""
    return _requirements(_values_of(stack))


def validate_stack(stack: StackLike) -> ConstraintValidation:
    """Check a complete or partial stack against every rule.

    Unset dimensions are ignored.  All violations are reported, not just
    the first one found.
    """
    violations = _collect_violations(_values_of(stack))
    return ConstraintValidation(
        valid=not violations,
        violations=violations,
        applied_rules=[v.rule for v in violations],
    )


def get_valid_options(
    dimension: str,
    current: StackLike,
    options: Iterable[str] | None = None,
) -> list[str]:
    """Values of *dimension* that keep *current* valid."""
    values = _values_of(current)
    values.pop(dimension, None)
    pool = list(options) if options is not None else list(domain_of(dimension))
    return [opt for opt in pool if not _collect_violations({**values, dimension: opt})]


def _pairing_defaults(values: Mapping[str, str]) -> dict[str, str]:
    result: dict[str, str] = {}
    for pairing in DEFAULT_PAIRINGS:
        if values.get(pairing.key) == pairing.value:
            for key, value in pairing.defaults.items():
                result.setdefault(key, value)
    return result


def apply_defaults(stack: StackLike) -> PartialStack:
    """Fill unset dimensions from the pairings triggered by set ones."""
    values = _values_of(stack)
    for key, value in _pairing_defaults(values).items():
        values.setdefault(key, value)
    return PartialStack(**values)


# ---------------------------------------------------------------------------
# Pre-generation feedback
# ---------------------------------------------------------------------------


def get_suggested_frameworks(archetype: str, language: str) -> list[str]:
    """Frameworks serving *archetype* that can be written in *language*."""
    if archetype in FRAMEWORKLESS_ARCHETYPES:
        return ["none"]
    return [fw.id for fw in get_compatible_frameworks(archetype, language)]


def suggest_frameworks(stack: StackLike) -> list[str]:
    """Frameworks compatible with everything else pinned in *stack*."""
    valid = get_valid_options("framework", stack)
    return [fw for fw in valid if fw != "none"] or valid


def validate_constraints(
    archetype: str | None = None,
    language: str | None = None,
    framework: str | None = None,
) -> ConstraintValidationResult:
    """Validate a caller's archetype/language/framework choice.

    Returns human-readable errors and suggestions rather than raising.
    """
    errors: list[str] = []
    suggestions: list[str] = []

    if archetype and language and not is_language_compatible(archetype, language):
        valid_languages = get_languages_for_archetype(archetype)
        errors.append(f"Language '{language}' is not compatible with archetype '{archetype}'")
        suggestions.append(f"Compatible languages for '{archetype}': {', '.join(valid_languages)}")

    if framework and language and framework != "none":
        accepted = framework_languages(framework)
        if accepted and language not in accepted:
            errors.append(f"Framework '{framework}' requires language '{accepted[0]}', not '{language}'")
            suggestions.append(f"Either use --language {accepted[0]} or try a different framework")

    if framework and archetype:
        targets = _framework_archetypes(framework)
        if targets and archetype not in targets:
            errors.append(f"Framework '{framework}' is for archetype '{targets[0]}', not '{archetype}'")
            suggestions.append(f"Either use --archetype {targets[0]} or choose a different framework")

    if errors and archetype and language:
        nearest = get_suggested_frameworks(archetype, language)
        if nearest:
            suggestions.append(f"Frameworks for {archetype}/{language}: {', '.join(nearest)}")

    return ConstraintValidationResult(valid=not errors, errors=errors, suggestions=suggestions)


def format_validation_error(seed: int, stack: StackLike, violations: list[Violation] | list[str]) -> str:
    """One-line summary of a failed resolution for *seed*."""
    values = _values_of(stack)
    stack_info = ", ".join(
        f"{dim}={values.get(dim, 'unknown')}" for dim in ("archetype", "language", "framework")
    )
    first = str(violations[0]) if violations else "unknown violation"
    more = f" (+{len(violations) - 1} more)" if len(violations) > 1 else ""
    return f"Seed {seed} ({stack_info}): {first}{more}"


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _constrained_pairs() -> frozenset[frozenset[str]]:
    pairs = {
        frozenset(p)
        for p in (
            ("archetype", "language"),
            ("language", "runtime"),
            ("framework", "language"),
            ("framework", "archetype"),
            ("database", "orm"),
            ("language", "orm"),
        )
    }
    for rule in INCOMPATIBILITY_RULES:
        pairs.update(frozenset((w, k)) for w in rule.when for k in rule.incompatible)
    for req in REQUIREMENT_RULES:
        pairs.update(frozenset((w, k)) for w in req.when for k in req.requires)
    return frozenset(pairs)


CONSTRAINED_PAIRS = _constrained_pairs()


def _constrained(dim_a: str, dim_b: str) -> bool:
    return frozenset((dim_a, dim_b)) in CONSTRAINED_PAIRS


@functools.lru_cache(maxsize=None)
def _compatible(dim_a: str, value_a: str, dim_b: str, value_b: str) -> bool:
    return not _collect_violations({dim_a: value_a, dim_b: value_b})


def _pair_ok(dim_a: str, value_a: str, dim_b: str, value_b: str) -> bool:
    return not _constrained(dim_a, dim_b) or _compatible(dim_a, value_a, dim_b, value_b)


def _make_arc_consistent(domains: dict[str, list[str]]) -> str | None:
    """Prune *domains* in place; return the first dimension left empty."""
    queue = deque((a, b) for a in domains for b in domains if a != b and _constrained(a, b))
    while queue:
        a, b = queue.popleft()
        kept = [va for va in domains[a] if any(_pair_ok(a, va, b, vb) for vb in domains[b])]
        if len(kept) == len(domains[a]):
            continue
        domains[a] = kept
        if not kept:
            return a
        queue.extend((c, a) for c in domains if c not in (a, b) and _constrained(c, a))
    return None


_ARCHETYPE_WEIGHTS = (
    ("backend", 30), ("web", 25), ("cli", 20), ("library", 15),
    ("desktop", 5), ("mobile", 4), ("game", 1),
)
_NODE_RUNTIME_WEIGHTS = (("node", 70), ("bun", 20), ("deno", 10))
_BACKEND_DATABASE_WEIGHTS = (("postgres", 40), ("sqlite", 25), ("mysql", 15), ("mongodb", 10), ("none", 10))
_OTHER_DATABASE_WEIGHTS = (("none", 60), ("sqlite", 30), ("postgres", 10))
_TRANSPORT_WEIGHTS = (("rest", 50), ("graphql", 20), ("grpc", 15), ("trpc", 10), ("websocket", 5))
_PACKAGING_WEIGHTS = (("docker", 60), ("none", 35), ("podman", 4), ("nix", 1))
_CICD_WEIGHTS = (("github-actions", 70), ("none", 20), ("gitlab-ci", 8), ("circleci", 2))
_STYLING_WEIGHTS = (("tailwind", 50), ("css-modules", 20), ("styled-components", 15), ("scss", 10), ("vanilla", 5))

_REST_ONLY_ARCHETYPES = ("web", "cli", "desktop", "mobile")


def _policy_choice(dim: str, assigned: Mapping[str, str]) -> str | None:
    """The value a dimension takes without drawing, if its policy fixes one."""
    archetype = assigned.get("archetype")
    framework = assigned.get("framework")
    language = assigned.get("language", "")
    match dim:
        case "database":
            return "none" if archetype == "web" else None
        case "orm":
            return "none" if assigned.get("database") == "none" else None
        case "transport":
            return "rest" if archetype in _REST_ONLY_ARCHETYPES else None
        case "styling":
            return "none" if archetype != "web" else None
        case "build_tool":
            if framework and framework != "none":
                return FRAMEWORK_MAP[framework].default_build_tool
            return next(iter(LANGUAGE_BUILD_TOOLS.get(language, ())), None)
        case "testing":
            if framework and framework != "none":
                return FRAMEWORK_MAP[framework].default_testing
            return next(iter(LANGUAGE_TEST_FRAMEWORKS.get(language, ())), None)
        case _:
            return None


def _policy_weights(dim: str, assigned: Mapping[str, str], candidates: list[str]) -> list[tuple[str, float]]:
    """Draw weights for *dim*; an empty list means a uniform pick."""
    match dim:
        case "archetype":
            return list(_ARCHETYPE_WEIGHTS)
        case "language":
            if "typescript" not in candidates:
                return []
            others = [c for c in candidates if c != "typescript"]
            return [("typescript", 40.0)] + [(c, 60 / len(others)) for c in others]
        case "runtime":
            if assigned.get("language") in ("typescript", "javascript"):
                return list(_NODE_RUNTIME_WEIGHTS)
            return []
        case "database":
            if assigned.get("archetype") == "backend":
                return list(_BACKEND_DATABASE_WEIGHTS)
            return list(_OTHER_DATABASE_WEIGHTS)
        case "transport":
            return list(_TRANSPORT_WEIGHTS)
        case "packaging":
            return list(_PACKAGING_WEIGHTS)
        case "cicd":
            return list(_CICD_WEIGHTS)
        case "styling":
            return list(_STYLING_WEIGHTS)
        case _:
            return []


class StackResolver:
    """Complete a partial stack into a rule-satisfying :class:`TechStack`.

    Unpinned dimensions are filled in :data:`DIMENSIONS` order.  For each one
    the resolver takes, without drawing:

    1. the only remaining candidate, or
    2. a default pairing triggered by a pinned dimension, or
    3. the dimension's fixed policy value (framework tooling defaults,
       ``rest`` transport for front ends and so on),

    whenever that value is still a candidate.  Otherwise it draws from the
    candidates with the dimension's weights, or uniformly.
    """

    def __init__(self, rng: SeededRNG | RNGFacade) -> None:
        self._rng = rng

    def resolve(self, partial: StackLike = None) -> TechStack:
        pinned = coerce_partial(partial).pinned()

        violations = _collect_violations(pinned)
        if violations:
            raise IncompatibleStack(
                violations,
                suggestions=[v.suggestion for v in violations if v.suggestion],
            )

        preferred = _pairing_defaults(pinned)
        remaining: dict[str, list[str]] = {}
        for dim in DIMENSIONS:
            if dim in pinned:
                continue
            remaining[dim] = [
                v for v in domain_of(dim) if all(_pair_ok(dim, v, p, pv) for p, pv in pinned.items())
            ]
            if not remaining[dim]:
                raise self._unsatisfiable(dim, pinned)

        wiped = _make_arc_consistent(remaining)
        if wiped is not None:
            raise self._unsatisfiable(wiped, pinned)

        assigned = dict(pinned)
        for dim in DIMENSIONS:
            if dim in pinned:
                continue
            assigned[dim] = self._assign(dim, remaining, assigned, preferred)

        stack = TechStack(**{dim: assigned[dim] for dim in DIMENSIONS})
        final = validate_stack(stack)
        if not final.valid:
            raise IncompatibleStack(
                final.violations,
                suggestions=[v.suggestion for v in final.violations if v.suggestion],
            )
        logger.debug("Resolved stack: %s", stack.as_dict())
        return stack

    def _assign(
        self,
        dim: str,
        remaining: dict[str, list[str]],
        assigned: dict[str, str],
        preferred: Mapping[str, str],
    ) -> str:
        candidates = list(remaining.pop(dim))
        while candidates:
            value = self._pick(dim, candidates, assigned, preferred)
            trial = {
                other: [v for v in values if _pair_ok(other, v, dim, value)]
                for other, values in remaining.items()
            }
            wiped = next((d for d, values in trial.items() if not values), None)
            if wiped is None:
                wiped = _make_arc_consistent(trial)
            if wiped is None:
                remaining.update(trial)
                return value
            logger.debug("Resolver repair: %s=%s leaves no value for %s", dim, value, wiped)
            candidates.remove(value)
        raise self._unsatisfiable(dim, assigned)

    def _pick(
        self,
        dim: str,
        candidates: list[str],
        assigned: Mapping[str, str],
        preferred: Mapping[str, str],
    ) -> str:
        if len(candidates) == 1:
            return candidates[0]

        for fixed in (preferred.get(dim), _policy_choice(dim, assigned)):
            if fixed is not None and fixed in candidates:
                return fixed

        pool = [(v, w) for v, w in _policy_weights(dim, assigned, candidates) if v in candidates and w > 0]
        if pool:
            return self._rng.pick_weighted(pool)

        if dim == "orm":
            real = [c for c in candidates if c != "none"]
            if real:
                return self._rng.pick(real)
        return self._rng.pick(candidates)

    @staticmethod
    def _unsatisfiable(dim: str, fixed: Mapping[str, str]) -> IncompatibleStack:
        constraining = [d for d in fixed if _constrained(d, dim)] or list(fixed)
        described = ", ".join(f"{d}='{fixed[d]}'" for d in constraining)
        suggestions = [f"unpin one of {_braced(constraining)}"]
        if dim == "framework":
            nearest = suggest_frameworks({k: v for k, v in fixed.items() if k != "framework"})
            if nearest:
                suggestions.append(f"compatible frameworks: {', '.join(nearest)}")
        violation = Violation(
            rule="unsatisfiable",
            dimensions=_ordered(dim, *constraining),
            message=f"No value for {dim} is compatible with {described}",
            suggestion=suggestions[0],
        )
        return IncompatibleStack([violation], suggestions=suggestions)
