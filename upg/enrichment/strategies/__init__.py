"""Built-in Pass 2 enrichment strategies."""

from upg.enrichment.strategies.cicd import GitHubActionsStrategy, GitLabCIStrategy, ReleaseStrategy
from upg.enrichment.strategies.devops import DockerComposeStrategy, DockerProductionStrategy
from upg.enrichment.strategies.docs import ReadmeEnrichStrategy
from upg.enrichment.strategies.logic import (
    ApiRoutesStrategy,
    CliCommandsStrategy,
    MiddlewareStrategy,
    WebComponentsStrategy,
)
from upg.enrichment.strategies.quality import EnvFilesStrategy, LintingStrategy
from upg.enrichment.strategies.testing import IntegrationTestsStrategy, TestConfigStrategy, UnitTestsStrategy

ALL_ENRICHMENT_STRATEGIES = (
    EnvFilesStrategy(),
    LintingStrategy(),
    GitHubActionsStrategy(),
    GitLabCIStrategy(),
    ReleaseStrategy(),
    ApiRoutesStrategy(),
    CliCommandsStrategy(),
    MiddlewareStrategy(),
    WebComponentsStrategy(),
    TestConfigStrategy(),
    UnitTestsStrategy(),
    IntegrationTestsStrategy(),
    DockerProductionStrategy(),
    DockerComposeStrategy(),
    ReadmeEnrichStrategy(),
)

__all__ = [
    "ALL_ENRICHMENT_STRATEGIES",
    "ApiRoutesStrategy",
    "CliCommandsStrategy",
    "DockerComposeStrategy",
    "DockerProductionStrategy",
    "EnvFilesStrategy",
    "GitHubActionsStrategy",
    "GitLabCIStrategy",
    "IntegrationTestsStrategy",
    "LintingStrategy",
    "MiddlewareStrategy",
    "ReadmeEnrichStrategy",
    "ReleaseStrategy",
    "TestConfigStrategy",
    "UnitTestsStrategy",
    "WebComponentsStrategy",
]
