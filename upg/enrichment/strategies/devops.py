"""Container enrichments: hardened production Dockerfiles and a fuller
docker-compose with health checks."""

from __future__ import annotations

import logging

from upg.engine.strategy import EnrichmentContext, EnrichmentStrategy
from upg.matrices import get_default_port
from upg.models import EnrichmentFlags, TechStack
from upg.strategies.common import package_name

logger = logging.getLogger(__name__)

_NODE_PROD = """\
# syntax=docker/dockerfile:1
FROM node:20-alpine AS deps
WORKDIR /app
COPY package*.json ./
RUN npm ci

FROM node:20-alpine AS builder
WORKDIR /app
COPY --from=deps /app/node_modules ./node_modules
COPY . .
RUN npm run build --if-present && npm prune --omit=dev

FROM node:20-alpine AS runner
WORKDIR /app
ENV NODE_ENV=production
RUN addgroup -S app && adduser -S app -G app
COPY --from=builder --chown=app:app /app ./
USER app
EXPOSE {port}
HEALTHCHECK --interval=30s --timeout=3s CMD wget -qO- http://localhost:{port}/health || exit 1
CMD ["npm", "start"]
"""

_PYTHON_PROD = """\
# syntax=docker/dockerfile:1
FROM python:3.12-slim AS builder
WORKDIR /app
COPY . .
RUN pip wheel --no-cache-dir --wheel-dir /wheels .

FROM python:3.12-slim
WORKDIR /app
ENV PYTHONDONTWRITEBYTECODE=1 PYTHONUNBUFFERED=1
RUN useradd --create-home app
COPY --from=builder /wheels /wheels
RUN pip install --no-cache-dir /wheels/*
USER app
EXPOSE {port}
CMD {command}
"""

_GO_PROD = """\
# syntax=docker/dockerfile:1
FROM golang:1.22-alpine AS builder
WORKDIR /app
COPY go.mod go.sum* ./
RUN go mod download
COPY . .
RUN CGO_ENABLED=0 go build -ldflags="-s -w" -o /app/server .

FROM gcr.io/distroless/static-debian12
COPY --from=builder /app/server /server
USER nonroot:nonroot
EXPOSE {port}
ENTRYPOINT ["/server"]
"""

_RUST_PROD = """\
# syntax=docker/dockerfile:1
FROM rust:1.75-slim AS builder
WORKDIR /app
COPY . .
RUN cargo build --release

FROM gcr.io/distroless/cc-debian12
COPY --from=builder /app/target/release/{binary} /app
USER nonroot:nonroot
EXPOSE {port}
ENTRYPOINT ["/app"]
"""

_PROD_DOCKERIGNORE = """\
.git
.github
.env
.env.*
*.log
node_modules
target
dist
__pycache__
.venv
coverage
"""


def render_production_dockerfile(context: EnrichmentContext) -> str | None:
    """Production Dockerfile for the stack's language, or ``None`` if unsupported."""
    stack = context.stack
    ports = context.introspect.get_exposed_ports()
    port = ports[0] if ports else 8080
    match stack.language:
        case "typescript" | "javascript":
            return _NODE_PROD.format(port=port)
        case "python":
            pkg = package_name(context.project_name)
            if stack.framework == "fastapi":
                command = f'["uvicorn", "{pkg}.main:app", "--host", "0.0.0.0", "--port", "{port}"]'
            elif stack.framework == "flask":
                command = f'["flask", "--app", "{pkg}.app", "run", "--host", "0.0.0.0", "--port", "{port}"]'
            else:
                command = f'["python", "-m", "{pkg}"]'
            return _PYTHON_PROD.format(port=port, command=command)
        case "go":
            return _GO_PROD.format(port=port)
        case "rust":
            return _RUST_PROD.format(port=port, binary=context.project_name)
        case _:
            return None


class DockerProductionStrategy(EnrichmentStrategy):
    id = "enrich-docker-prod"
    name = "Production Docker Configuration"
    priority = 40

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return (
            bool(flags and flags.docker_prod)
            and stack.packaging == "docker"
            and stack.language in ("typescript", "javascript", "python", "go", "rust")
        )

    async def apply(self, context: EnrichmentContext) -> None:
        dockerfile = render_production_dockerfile(context)
        if dockerfile is None:
            logger.debug("No production Dockerfile for %s; keeping the Pass 1 file", context.stack.language)
        else:
            context.files["Dockerfile"] = dockerfile
        if not context.introspect.has_file(".dockerignore"):
            context.files[".dockerignore"] = _PROD_DOCKERIGNORE


# ---------------------------------------------------------------------------
# docker-compose
# ---------------------------------------------------------------------------

_DB_SERVICES = {
    "postgres": (
        "postgres:16-alpine",
        {"POSTGRES_USER": "user", "POSTGRES_PASSWORD": "password", "POSTGRES_DB": "mydb"},
        "pg_isready -U user",
        "/var/lib/postgresql/data",
    ),
    "mysql": (
        "mysql:8.3",
        {"MYSQL_ROOT_PASSWORD": "password", "MYSQL_DATABASE": "mydb"},
        "mysqladmin ping -h localhost",
        "/var/lib/mysql",
    ),
    "mongodb": ("mongo:7", {}, "mongosh --eval 'db.runCommand({ping: 1})'", "/data/db"),
    "redis": ("redis:7-alpine", {}, "redis-cli ping", "/data"),
}


def render_compose(context: EnrichmentContext) -> str:
    stack = context.stack
    ports = context.introspect.get_exposed_ports()
    port = ports[0] if ports else 3000
    service = _DB_SERVICES.get(stack.database)

    lines = [
        "services:",
        "  app:",
        "    build: .",
        "    ports:",
        f'      - "{port}:{port}"',
        "    env_file:",
        "      - .env",
        "    restart: unless-stopped",
    ]
    if service is None:
        return "\n".join(lines) + "\n"

    image, environment, healthcheck, data_dir = service
    db_port = get_default_port(stack.database)
    lines += [
        "    depends_on:",
        "      db:",
        "        condition: service_healthy",
        "",
        "  db:",
        f"    image: {image}",
        "    ports:",
        f'      - "{db_port}:{db_port}"',
    ]
    if environment:
        lines.append("    environment:")
        lines += [f"      {key}: {value}" for key, value in environment.items()]
    lines += [
        "    volumes:",
        f"      - db-data:{data_dir}",
        "    healthcheck:",
        f'      test: ["CMD-SHELL", "{healthcheck}"]',
        "      interval: 10s",
        "      timeout: 5s",
        "      retries: 5",
        "",
        "volumes:",
        "  db-data:",
    ]
    return "\n".join(lines) + "\n"


class DockerComposeStrategy(EnrichmentStrategy):
    id = "enrich-docker-compose"
    name = "Docker Compose Enhancement"
    priority = 45

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.docker_prod) and stack.packaging == "docker"

    async def apply(self, context: EnrichmentContext) -> None:
        context.files["docker-compose.yml"] = render_compose(context)
