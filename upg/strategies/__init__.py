"""Built-in Pass 1 generation strategies."""

from upg.strategies.common import (
    COMMON_STRATEGIES,
    CIStrategy,
    DockerStrategy,
    GitignoreStrategy,
    LicenseStrategy,
    ReadmeStrategy,
)
from upg.strategies.go import GO_STRATEGIES, CobraStrategy, GinStrategy
from upg.strategies.python import (
    PYTHON_STRATEGIES,
    ArgparseStrategy,
    ClickStrategy,
    FastAPIStrategy,
    FlaskStrategy,
    PythonLibraryStrategy,
)
from upg.strategies.rust import RUST_STRATEGIES, ClapStrategy
from upg.strategies.typescript import TYPESCRIPT_STRATEGIES, CommanderStrategy, ExpressStrategy

ALL_STRATEGIES = (
    *COMMON_STRATEGIES,
    *PYTHON_STRATEGIES,
    *TYPESCRIPT_STRATEGIES,
    *GO_STRATEGIES,
    *RUST_STRATEGIES,
)

__all__ = [
    "ALL_STRATEGIES",
    "ArgparseStrategy",
    "CIStrategy",
    "COMMON_STRATEGIES",
    "ClapStrategy",
    "ClickStrategy",
    "CobraStrategy",
    "CommanderStrategy",
    "DockerStrategy",
    "ExpressStrategy",
    "FastAPIStrategy",
    "FlaskStrategy",
    "GO_STRATEGIES",
    "GinStrategy",
    "GitignoreStrategy",
    "LicenseStrategy",
    "PYTHON_STRATEGIES",
    "PythonLibraryStrategy",
    "RUST_STRATEGIES",
    "ReadmeStrategy",
    "TYPESCRIPT_STRATEGIES",
]
