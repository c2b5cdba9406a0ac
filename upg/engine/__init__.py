"""Generation engine: random source, resolver, strategy pipeline, assembler."""

from upg.engine.assembler import ProjectAssembler, create_assembler, generate_project
from upg.engine.constraints import (
    DEFAULT_PAIRINGS,
    INCOMPATIBILITY_RULES,
    REQUIREMENT_RULES,
    ConstraintValidation,
    ConstraintValidationResult,
    StackResolver,
    Violation,
    apply_defaults,
    check_incompatibilities,
    check_requirements,
    format_validation_error,
    get_suggested_frameworks,
    get_valid_options,
    suggest_frameworks,
    validate_constraints,
    validate_stack,
)
from upg.engine.rng import RNGFacade, RNGFactory, SeededRNG, WeightedItem
from upg.engine.seed import is_valid_seed, parse_seed
from upg.engine.strategy import (
    EnrichmentContext,
    EnrichmentStrategy,
    GenerationContext,
    GenerationStrategy,
    Strategy,
    StrategyPipeline,
)

__all__ = [
    "ConstraintValidation",
    "ConstraintValidationResult",
    "DEFAULT_PAIRINGS",
    "EnrichmentContext",
    "EnrichmentStrategy",
    "GenerationContext",
    "GenerationStrategy",
    "INCOMPATIBILITY_RULES",
    "ProjectAssembler",
    "REQUIREMENT_RULES",
    "RNGFacade",
    "RNGFactory",
    "SeededRNG",
    "StackResolver",
    "Strategy",
    "StrategyPipeline",
    "Violation",
    "WeightedItem",
    "apply_defaults",
    "check_incompatibilities",
    "check_requirements",
    "create_assembler",
    "format_validation_error",
    "generate_project",
    "get_suggested_frameworks",
    "get_valid_options",
    "is_valid_seed",
    "parse_seed",
    "suggest_frameworks",
    "validate_constraints",
    "validate_stack",
]
