"""Test-runner configuration and generated test suites."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from upg.engine.strategy import EnrichmentContext, EnrichmentStrategy
from upg.models import EnrichmentFlags, TechStack
from upg.strategies.common import service_port

logger = logging.getLogger(__name__)

_VITEST_CONFIG = """\
import {{ defineConfig }} from 'vitest/config';

export default defineConfig({{
  test: {{
    globals: true,
    environment: 'node',
    include: ['src/**/*.test.{ext}', 'tests/**/*.test.{ext}'],
    coverage: {{
      provider: 'v8',
      reporter: ['text', 'lcov'],
    }},
  }},
}});
"""

_JEST_CONFIG = """\
/** @type {import('jest').Config} */
export default {
  testEnvironment: 'node',
  collectCoverageFrom: ['src/**/*.{js,ts}'],
  coverageDirectory: 'coverage',
};
"""

_PYTEST_SECTION = """
[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-v --tb=short"
markers = [
    "slow: long-running tests",
    "integration: tests that need external services",
]
"""


class TestConfigStrategy(EnrichmentStrategy):
    """Add a runner config when the project has none."""

    __test__ = False

    id = "enrich-test-config"
    name = "Test Configuration"
    priority = 30

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.tests) and stack.testing in ("vitest", "jest", "pytest")

    async def apply(self, context: EnrichmentContext) -> None:
        files, introspect = context.files, context.introspect
        match context.stack.testing:
            case "vitest":
                if not introspect.find_files("vitest.config.*"):
                    ext = "ts" if context.stack.language == "typescript" else "js"
                    files[f"vitest.config.{ext}"] = _VITEST_CONFIG.format(ext=ext)
            case "jest":
                if not introspect.find_files("jest.config.*"):
                    files["jest.config.js"] = _JEST_CONFIG
            case "pytest":
                if introspect.has_file("pytest.ini"):
                    return
                pyproject = introspect.get_content("pyproject.toml")
                if pyproject is None:
                    files["pytest.ini"] = "[pytest]\ntestpaths = tests\naddopts = -v --tb=short\n"
                elif "[tool.pytest.ini_options]" not in pyproject:
                    files["pyproject.toml"] = pyproject.rstrip("\n") + "\n" + _PYTEST_SECTION


# ---------------------------------------------------------------------------
# Generated test suites
# ---------------------------------------------------------------------------

_SERVICE_FRAMEWORKS = ("express", "fastify", "nestjs")

_VITEST_SERVICE_SUITE = """\
import {{ describe, it, expect }} from 'vitest';

describe('{project_name}', () => {{
  describe('Health Check', () => {{
    it('returns ok status', () => {{
      const result = {{ status: 'ok', timestamp: new Date().toISOString() }};
      expect(result.status).toBe('ok');
      expect(result.timestamp).toBeDefined();
    }});
  }});

  describe('Data Validation', () => {{
    it('rejects empty names', () => {{
      const validate = (name: string) => name.length > 0;
      expect(validate('')).toBe(false);
      expect(validate('test')).toBe(true);
    }});

    it('handles null inputs', () => {{
      const sanitize = (input: string | null | undefined): string => input?.trim() ?? '';
      expect(sanitize(null)).toBe('');
      expect(sanitize(undefined)).toBe('');
      expect(sanitize('  hello  ')).toBe('hello');
    }});
  }});

  describe('ID Generation', () => {{
    it('generates unique IDs', () => {{
      const ids = new Set(Array.from({{ length: 100 }}, () => crypto.randomUUID()));
      expect(ids.size).toBe(100);
    }});
  }});
}});
"""

_VITEST_APP_SUITE = """\
import {{ describe, it, expect }} from 'vitest';

describe('{project_name}', () => {{
  describe('Configuration', () => {{
    it('merges config with defaults', () => {{
      const merged = {{ ...{{ port: 3000, host: 'localhost' }}, ...{{ port: 8080 }} }};
      expect(merged.port).toBe(8080);
      expect(merged.host).toBe('localhost');
    }});
  }});

  describe('Data Processing', () => {{
    it('handles arrays', () => {{
      const items = ['a', 'b', 'c'];
      expect(items).toHaveLength(3);
      expect(items).toContain('b');
    }});

    it('sanitizes string input', () => {{
      const sanitize = (input: string | null | undefined): string => input?.trim() ?? '';
      expect(sanitize(null)).toBe('');
      expect(sanitize('  hello  ')).toBe('hello');
    }});
  }});

  describe('Async Operations', () => {{
    it('resolves promises', async () => {{
      await expect(Promise.resolve(42)).resolves.toBe(42);
    }});
  }});
}});
"""

_PYTEST_SUITE = '''\
"""Unit tests for {project_name}."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest


def _sanitize(value: str | None) -> str:
    return (value or "").strip()


class TestHealthCheck:
    def test_health_check_returns_ok(self):
        result = {{"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}}
        assert result["status"] == "ok"
        assert result["timestamp"]

    def test_timestamp_round_trips(self):
        timestamp = datetime.now(timezone.utc).isoformat()
        assert isinstance(datetime.fromisoformat(timestamp), datetime)


class TestDataValidation:
    def test_sanitize_input(self):
        assert _sanitize(None) == ""
        assert _sanitize("") == ""
        assert _sanitize("  hello  ") == "hello"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("hello", True), ("", False), ("  ", False)],
    )
    def test_is_valid_name(self, value, expected):
        assert bool(_sanitize(value)) is expected


class TestConfiguration:
    def test_config_override(self):
        merged = {{**{{"port": 3000, "host": "localhost"}}, **{{"port": 8080}}}}
        assert merged == {{"port": 8080, "host": "localhost"}}
'''

_GO_SUITE = """\
package main

import (
\t"strings"
\t"testing"
\t"time"
)

func TestHealthCheck(t *testing.T) {
\tresult := map[string]string{
\t\t"status":    "ok",
\t\t"timestamp": time.Now().UTC().Format(time.RFC3339),
\t}
\tif result["status"] != "ok" {
\t\tt.Errorf("expected status 'ok', got '%s'", result["status"])
\t}
\tif result["timestamp"] == "" {
\t\tt.Error("expected non-empty timestamp")
\t}
}

func TestDataValidation(t *testing.T) {
\ttests := []struct {
\t\tname     string
\t\tinput    string
\t\texpected bool
\t}{
\t\t{"valid name", "hello", true},
\t\t{"empty string", "", false},
\t\t{"whitespace only", "   ", false},
\t}
\tfor _, tt := range tests {
\t\tt.Run(tt.name, func(t *testing.T) {
\t\t\tif got := strings.TrimSpace(tt.input) != ""; got != tt.expected {
\t\t\t\tt.Errorf("expected %v, got %v", tt.expected, got)
\t\t\t}
\t\t})
\t}
}
"""

_RUST_SUITE = """\
//! Unit tests for {project_name}

#[test]
fn health_check() {{
    let status = "ok";
    assert_eq!(status, "ok");
}}

#[test]
fn data_validation() {{
    let validate = |name: &str| !name.trim().is_empty();
    assert!(validate("hello"));
    assert!(!validate(""));
    assert!(!validate("   "));
}}

#[test]
fn sanitize_input() {{
    let sanitize = |input: Option<&str>| input.unwrap_or("").trim().to_string();
    assert_eq!(sanitize(None), "");
    assert_eq!(sanitize(Some("  hello  ")), "hello");
}}

#[test]
fn id_uniqueness() {{
    use std::collections::HashSet;
    let ids: HashSet<String> = (0..100).map(|i| format!("id-{{}}", i)).collect();
    assert_eq!(ids.len(), 100);
}}
"""


class UnitTestsStrategy(EnrichmentStrategy):
    """Starter unit suite in the project's own test runner.

    Files Pass 1 already wrote at the same path are left alone.
    """

    id = "enrich-unit-tests"
    name = "Unit Test Generation"
    priority = 30

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.tests)

    async def apply(self, context: EnrichmentContext) -> None:
        stack, name = context.stack, context.project_name
        match stack.language:
            case "typescript" | "javascript":
                suite = _VITEST_SERVICE_SUITE if stack.framework in _SERVICE_FRAMEWORKS else _VITEST_APP_SUITE
                path, content = "src/__tests__/app.test.ts", suite.format(project_name=name)
            case "python":
                path, content = "tests/test_app.py", _PYTEST_SUITE.format(project_name=name)
            case "go":
                path, content = "main_test.go", _GO_SUITE
            case "rust":
                path, content = "tests/unit_test.rs", _RUST_SUITE.format(project_name=name)
            case language:
                logger.debug("No unit test templates for %s", language)
                return
        if context.introspect.has_file(path):
            logger.debug("Keeping existing %s", path)
            return
        context.files[path] = content


_ROUTE_FILE = re.compile(r"routes/(?!__init__)([^/.]+)\.(?:ts|py|go|rs)$")
DEFAULT_ENDPOINT = "/api/v1/items"

_VITEST_INTEGRATION = """\
import {{ describe, it, expect }} from 'vitest';

const BASE_URL = process.env.BASE_URL ?? 'http://localhost:{port}';

describe('API integration', () => {{
  it('GET /health returns ok', async () => {{
    const response = await fetch(`${{BASE_URL}}/health`);
    expect(response.status).toBe(200);
    expect((await response.json()).status).toBe('ok');
  }});

  it('creates a resource', async () => {{
    const response = await fetch(`${{BASE_URL}}{endpoint}`, {{
      method: 'POST',
      headers: {{ 'Content-Type': 'application/json' }},
      body: JSON.stringify({{ name: 'Test Item' }}),
    }});
    expect(response.status).toBe(201);
    const body = await response.json();
    expect(body.data.name).toBe('Test Item');
    expect(body.data.id).toBeDefined();
  }});

  it('lists resources', async () => {{
    const response = await fetch(`${{BASE_URL}}{endpoint}`);
    expect(response.status).toBe(200);
    const body = await response.json();
    expect(body.data).toBeInstanceOf(Array);
    expect(body.total).toBeGreaterThanOrEqual(0);
  }});

  it('returns 404 for an unknown id', async () => {{
    const response = await fetch(`${{BASE_URL}}{endpoint}/non-existent-id`);
    expect(response.status).toBe(404);
  }});
}});
"""

_PYTEST_INTEGRATION = '''\
"""API integration tests; expects the service on BASE_URL."""

from __future__ import annotations

import os

import pytest
import requests

BASE_URL = os.environ.get("BASE_URL", "http://localhost:{port}")

pytestmark = pytest.mark.integration


class TestHealthEndpoint:
    def test_health_returns_ok(self):
        response = requests.get(f"{{BASE_URL}}/health", timeout=5)
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestCrudOperations:
    def test_create_resource(self):
        response = requests.post(f"{{BASE_URL}}{endpoint}", json={{"name": "Test Item"}}, timeout=5)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Test Item"
        assert data["id"]

    def test_list_resources(self):
        response = requests.get(f"{{BASE_URL}}{endpoint}", timeout=5)
        assert response.status_code == 200
        assert isinstance(response.json()["data"], list)

    def test_not_found(self):
        response = requests.get(f"{{BASE_URL}}{endpoint}/non-existent-id", timeout=5)
        assert response.status_code == 404
'''


def route_endpoint(paths: Iterable[str]) -> str:
    """URL path for the first generated routes module, else :data:`DEFAULT_ENDPOINT`."""
    for path in paths:
        if match := _ROUTE_FILE.search(path):
            return f"/{match.group(1)}"
    return DEFAULT_ENDPOINT


class IntegrationTestsStrategy(EnrichmentStrategy):
    """HTTP suite run against a live backend.

    Reads ``context.files`` rather than the introspector so routes added
    earlier in this pass decide the endpoint.
    """

    id = "enrich-integration-tests"
    name = "Integration Test Generation"
    priority = 32

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.tests) and stack.archetype == "backend"

    async def apply(self, context: EnrichmentContext) -> None:
        ports = context.introspect.get_exposed_ports()
        port = ports[0] if ports else service_port(context.stack)
        endpoint = route_endpoint(context.files)
        match context.stack.language:
            case "typescript" | "javascript":
                context.files["tests/integration/api.test.ts"] = _VITEST_INTEGRATION.format(
                    port=port, endpoint=endpoint
                )
            case "python":
                context.files["tests/test_integration.py"] = _PYTEST_INTEGRATION.format(port=port, endpoint=endpoint)
            case language:
                logger.debug("No integration test templates for %s", language)
                return
        logger.debug("Integration tests target port %d at %s", port, endpoint)
