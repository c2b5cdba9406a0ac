"""UPG Procedural: seed-driven project generation and enrichment."""

from upg.api import UPG
from upg.config import DEFAULT_UPG_VERSION, ConfigManager, configure_logging
from upg.engine import (
    ProjectAssembler,
    SeededRNG,
    StackResolver,
    StrategyPipeline,
    get_valid_options,
    validate_stack,
)
from upg.enrichment import ALL_ENRICHMENT_STRATEGIES, ProjectEnricher, ProjectIntrospector
from upg.errors import (
    IncompatibleStack,
    InvalidSeed,
    RandomSourceError,
    UPGError,
    failed_strategy,
)
from upg.models import EnrichedProject, EnrichmentFlags, GeneratedProject, TechStack
from upg.strategies import ALL_STRATEGIES

__version__ = DEFAULT_UPG_VERSION

__all__ = [
    "ALL_ENRICHMENT_STRATEGIES",
    "ALL_STRATEGIES",
    "ConfigManager",
    "EnrichedProject",
    "EnrichmentFlags",
    "GeneratedProject",
    "IncompatibleStack",
    "InvalidSeed",
    "ProjectAssembler",
    "ProjectEnricher",
    "ProjectIntrospector",
    "RandomSourceError",
    "SeededRNG",
    "StackResolver",
    "StrategyPipeline",
    "TechStack",
    "UPG",
    "UPGError",
    "__version__",
    "configure_logging",
    "failed_strategy",
    "get_valid_options",
    "validate_stack",
]
