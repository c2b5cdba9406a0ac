"""Logic fill: CLI subcommands, CRUD routes, middleware and web components.

Every strategy here is gated on ``flags.fill_logic`` plus an archetype.
Python output lands inside the generated package; TypeScript output lands
under ``src/``.  Templates are TypeScript-only, so JavaScript projects are
left as Pass 1 wrote them.
"""

from __future__ import annotations

import logging

from upg.engine.strategy import EnrichmentContext, EnrichmentStrategy
from upg.models import EnrichmentFlags, TechStack
from upg.strategies.common import package_name

logger = logging.getLogger(__name__)

MODEL_NAMES = ("User", "Item", "Post", "Task", "Product", "Order")


def config_file_name(project_name: str) -> str:
    """Dotfile the generated CLI keeps its settings in (``my-cli`` -> ``.myclirc.json``)."""
    return f".{project_name.replace('-', '')}rc.json"


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------

_TS_COMMANDS = """\
import {{ readFileSync, writeFileSync, existsSync }} from 'node:fs';
import {{ join }} from 'node:path';

const CONFIG_FILE = '{config_file}';

interface Config {{
  version: string;
  outputDir: string;
  verbose: boolean;
}}

const DEFAULT_CONFIG: Config = {{
  version: '1.0.0',
  outputDir: './output',
  verbose: false,
}};

/** Initialize a new project configuration */
export function initCommand(options: {{ force?: boolean }}): void {{
  const configPath = join(process.cwd(), CONFIG_FILE);

  if (existsSync(configPath) && !options.force) {{
    console.error(`Configuration file already exists: ${{CONFIG_FILE}}`);
    console.error('Use --force to overwrite.');
    process.exit(1);
  }}

  writeFileSync(configPath, JSON.stringify(DEFAULT_CONFIG, null, 2), 'utf-8');
  console.log(`Created ${{CONFIG_FILE}}`);
}}

/** Show or update configuration */
export function configCommand(options: {{ key?: string; set?: string }}): void {{
  const config = loadConfig() as unknown as Record<string, unknown>;

  if (options.key && options.set) {{
    config[options.key] = options.set;
    saveConfig(config as unknown as Config);
    console.log(`Set ${{options.key}} = ${{options.set}}`);
    return;
  }}

  if (options.key) {{
    const value = config[options.key];
    if (value === undefined) {{
      console.error(`Unknown config key: ${{options.key}}`);
      process.exit(1);
    }}
    console.log(String(value));
    return;
  }}

  for (const [key, value] of Object.entries(config)) {{
    console.log(`${{key}}: ${{JSON.stringify(value)}}`);
  }}
}}

/** List available configurations */
export function listCommand(options: {{ format?: 'text' | 'json' }}): void {{
  const items = [
    {{ name: 'default', description: 'Default configuration', status: 'active' }},
    {{ name: 'development', description: 'Development settings', status: 'active' }},
    {{ name: 'production', description: 'Production settings', status: 'inactive' }},
  ];

  if (options.format === 'json') {{
    console.log(JSON.stringify(items, null, 2));
    return;
  }}

  console.log('Available configurations:\\n');
  for (const item of items) {{
    const icon = item.status === 'active' ? '[*]' : '[ ]';
    console.log(`  ${{icon}} ${{item.name.padEnd(20)}} ${{item.description}}`);
  }}
}}

/** Show system information */
export function infoCommand(): void {{
  console.log('{project_name} Information\\n');
  console.log(`  Version:      ${{DEFAULT_CONFIG.version}}`);
  console.log(`  Node.js:      ${{process.version}}`);
  console.log(`  Platform:     ${{process.platform}}`);
  console.log(`  Architecture: ${{process.arch}}`);
  console.log(`  Working Dir:  ${{process.cwd()}}`);
}}

function loadConfig(): Config {{
  try {{
    return JSON.parse(readFileSync(join(process.cwd(), CONFIG_FILE), 'utf-8'));
  }} catch {{
    return {{ ...DEFAULT_CONFIG }};
  }}
}}

function saveConfig(config: Config): void {{
  writeFileSync(join(process.cwd(), CONFIG_FILE), JSON.stringify(config, null, 2), 'utf-8');
}}
"""

_PY_COMMANDS = '''\
"""Subcommand implementations for {project_name}."""

from __future__ import annotations

import json
import platform
import sys
from pathlib import Path

CONFIG_FILE = "{config_file}"

DEFAULT_CONFIG = {{
    "version": "1.0.0",
    "output_dir": "./output",
    "verbose": False,
}}


def init_command(force: bool = False) -> None:
    """Write the default configuration file."""
    config_path = Path.cwd() / CONFIG_FILE
    if config_path.exists() and not force:
        print(f"Configuration file already exists: {{CONFIG_FILE}}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        sys.exit(1)
    config_path.write_text(json.dumps(DEFAULT_CONFIG, indent=2))
    print(f"Created {{CONFIG_FILE}}")


def config_command(key: str | None = None, value: str | None = None) -> None:
    """Show or update configuration."""
    config = _load_config()
    if key and value:
        config[key] = value
        _save_config(config)
        print(f"Set {{key}} = {{value}}")
        return
    if key:
        if key not in config:
            print(f"Unknown config key: {{key}}", file=sys.stderr)
            sys.exit(1)
        print(config[key])
        return
    for k, v in config.items():
        print(f"{{k}}: {{json.dumps(v)}}")


def list_command(fmt: str = "text") -> None:
    items = [
        {{"name": "default", "description": "Default configuration", "status": "active"}},
        {{"name": "development", "description": "Development settings", "status": "active"}},
        {{"name": "production", "description": "Production settings", "status": "inactive"}},
    ]
    if fmt == "json":
        print(json.dumps(items, indent=2))
        return
    print("Available configurations:\\n")
    for item in items:
        icon = "[*]" if item["status"] == "active" else "[ ]"
        print(f"  {{icon}} {{item['name']:<20}} {{item['description']}}")


def info_command() -> None:
    print("{project_name} Information\\n")
    print(f"  Version:      {{DEFAULT_CONFIG['version']}}")
    print(f"  Python:       {{platform.python_version()}}")
    print(f"  Platform:     {{platform.system()}}")
    print(f"  Architecture: {{platform.machine()}}")
    print(f"  Working Dir:  {{Path.cwd()}}")


def _load_config() -> dict:
    try:
        return json.loads((Path.cwd() / CONFIG_FILE).read_text())
    except FileNotFoundError:
        return dict(DEFAULT_CONFIG)


def _save_config(config: dict) -> None:
    (Path.cwd() / CONFIG_FILE).write_text(json.dumps(config, indent=2))
'''


class CliCommandsStrategy(EnrichmentStrategy):
    """init / config / list / info subcommands for CLI projects."""

    id = "enrich-cli-commands"
    name = "CLI Command Logic Fill"
    priority = 20

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.fill_logic) and stack.archetype == "cli"

    async def apply(self, context: EnrichmentContext) -> None:
        values = {"project_name": context.project_name, "config_file": config_file_name(context.project_name)}
        match context.stack.language:
            case "typescript":
                context.files["src/commands/index.ts"] = _TS_COMMANDS.format(**values)
            case "python":
                pkg = package_name(context.project_name)
                context.files[f"{pkg}/commands.py"] = _PY_COMMANDS.format(**values)
            case language:
                logger.debug("No command templates for %s", language)


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------

_EXPRESS_ROUTES = """\
import {{ Router }} from 'express';
import type {{ Request, Response }} from 'express';

const router = Router();

interface {model} {{
  id: string;
  name: string;
  createdAt: Date;
  updatedAt: Date;
}}

// In-memory store
const {lower}s = new Map<string, {model}>();

router.get('/{lower}s', (_req: Request, res: Response) => {{
  const items = Array.from({lower}s.values());
  res.json({{ data: items, total: items.length }});
}});

router.get('/{lower}s/:id', (req: Request, res: Response) => {{
  const item = {lower}s.get(req.params.id);
  if (!item) {{
    return res.status(404).json({{ error: '{model} not found' }});
  }}
  res.json({{ data: item }});
}});

router.post('/{lower}s', (req: Request, res: Response) => {{
  const {{ name }} = req.body;
  if (!name || typeof name !== 'string') {{
    return res.status(400).json({{ error: 'Name is required' }});
  }}
  const now = new Date();
  const item: {model} = {{ id: crypto.randomUUID(), name, createdAt: now, updatedAt: now }};
  {lower}s.set(item.id, item);
  res.status(201).json({{ data: item }});
}});

router.put('/{lower}s/:id', (req: Request, res: Response) => {{
  const existing = {lower}s.get(req.params.id);
  if (!existing) {{
    return res.status(404).json({{ error: '{model} not found' }});
  }}
  const updated: {model} = {{ ...existing, name: req.body.name ?? existing.name, updatedAt: new Date() }};
  {lower}s.set(req.params.id, updated);
  res.json({{ data: updated }});
}});

router.delete('/{lower}s/:id', (req: Request, res: Response) => {{
  if (!{lower}s.delete(req.params.id)) {{
    return res.status(404).json({{ error: '{model} not found' }});
  }}
  res.status(204).send();
}});

export default router;
"""

_NEST_ROUTES = """\
import {{
  BadRequestException,
  Body,
  Controller,
  Delete,
  Get,
  HttpCode,
  HttpStatus,
  NotFoundException,
  Param,
  Post,
  Put,
}} from '@nestjs/common';

interface {model} {{
  id: string;
  name: string;
  createdAt: Date;
  updatedAt: Date;
}}

@Controller('{lower}s')
export class {model}Controller {{
  private readonly {lower}s = new Map<string, {model}>();

  @Get()
  findAll() {{
    const items = Array.from(this.{lower}s.values());
    return {{ data: items, total: items.length }};
  }}

  @Get(':id')
  findOne(@Param('id') id: string) {{
    const item = this.{lower}s.get(id);
    if (!item) throw new NotFoundException('{model} not found');
    return {{ data: item }};
  }}

  @Post()
  @HttpCode(HttpStatus.CREATED)
  create(@Body() body: {{ name: string }}) {{
    if (!body.name) throw new BadRequestException('Name is required');
    const now = new Date();
    const item: {model} = {{ id: crypto.randomUUID(), name: body.name, createdAt: now, updatedAt: now }};
    this.{lower}s.set(item.id, item);
    return {{ data: item }};
  }}

  @Put(':id')
  update(@Param('id') id: string, @Body() body: {{ name?: string }}) {{
    const existing = this.{lower}s.get(id);
    if (!existing) throw new NotFoundException('{model} not found');
    const updated = {{ ...existing, name: body.name ?? existing.name, updatedAt: new Date() }};
    this.{lower}s.set(id, updated);
    return {{ data: updated }};
  }}

  @Delete(':id')
  @HttpCode(HttpStatus.NO_CONTENT)
  remove(@Param('id') id: string) {{
    if (!this.{lower}s.delete(id)) throw new NotFoundException('{model} not found');
  }}
}}
"""

_FASTAPI_ROUTES = '''\
"""CRUD routes for {model} resources."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

router = APIRouter(prefix="/{lower}s", tags=["{lower}s"])


class {model}Create(BaseModel):
    name: str


class {model}Update(BaseModel):
    name: str | None = None


class {model}(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime


_{lower}s: dict[str, {model}] = {{}}


def _get_or_404({lower}_id: str) -> {model}:
    try:
        return _{lower}s[{lower}_id]
    except KeyError:
        raise HTTPException(status_code=404, detail="{model} not found") from None


@router.get("")
async def list_{lower}s() -> dict:
    items = list(_{lower}s.values())
    return {{"data": items, "total": len(items)}}


@router.get("/{{{lower}_id}}")
async def get_{lower}({lower}_id: str) -> dict:
    return {{"data": _get_or_404({lower}_id)}}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_{lower}(payload: {model}Create) -> dict:
    now = datetime.now(timezone.utc)
    item = {model}(id=str(uuid4()), name=payload.name, created_at=now, updated_at=now)
    _{lower}s[item.id] = item
    return {{"data": item}}


@router.put("/{{{lower}_id}}")
async def update_{lower}({lower}_id: str, payload: {model}Update) -> dict:
    existing = _get_or_404({lower}_id)
    updated = existing.model_copy(
        update={{"name": payload.name or existing.name, "updated_at": datetime.now(timezone.utc)}}
    )
    _{lower}s[{lower}_id] = updated
    return {{"data": updated}}


@router.delete("/{{{lower}_id}}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_{lower}({lower}_id: str) -> None:
    _get_or_404({lower}_id)
    del _{lower}s[{lower}_id]
'''

_FLASK_ROUTES = '''\
"""CRUD routes for {model} resources."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from flask import Blueprint, jsonify, request

{lower}_bp = Blueprint("{lower}s", __name__, url_prefix="/{lower}s")

_{lower}s: dict[str, dict] = {{}}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@{lower}_bp.get("")
def list_{lower}s():
    items = list(_{lower}s.values())
    return jsonify({{"data": items, "total": len(items)}})


@{lower}_bp.get("/<{lower}_id>")
def get_{lower}({lower}_id: str):
    item = _{lower}s.get({lower}_id)
    if item is None:
        return jsonify({{"error": "{model} not found"}}), 404
    return jsonify({{"data": item}})


@{lower}_bp.post("")
def create_{lower}():
    payload = request.get_json(silent=True) or {{}}
    if not payload.get("name"):
        return jsonify({{"error": "Name is required"}}), 400
    now = _now()
    item = {{"id": str(uuid4()), "name": payload["name"], "created_at": now, "updated_at": now}}
    _{lower}s[item["id"]] = item
    return jsonify({{"data": item}}), 201


@{lower}_bp.put("/<{lower}_id>")
def update_{lower}({lower}_id: str):
    item = _{lower}s.get({lower}_id)
    if item is None:
        return jsonify({{"error": "{model} not found"}}), 404
    payload = request.get_json(silent=True) or {{}}
    item["name"] = payload.get("name", item["name"])
    item["updated_at"] = _now()
    return jsonify({{"data": item}})


@{lower}_bp.delete("/<{lower}_id>")
def delete_{lower}({lower}_id: str):
    if _{lower}s.pop({lower}_id, None) is None:
        return jsonify({{"error": "{model} not found"}}), 404
    return "", 204
'''

_GO_ROUTES_HEADER = """\
package handlers

import (
\t"net/http"
\t"sync"
\t"time"

\t"github.com/google/uuid"
\t"{module}"
)

type {model} struct {{
\tID        string    `json:"id"`
\tName      string    `json:"name"`
\tCreatedAt time.Time `json:"created_at"`
\tUpdatedAt time.Time `json:"updated_at"`
}}

var (
\t{lower}s   = make(map[string]{model})
\t{lower}sMu sync.RWMutex
)
"""

_GIN_HANDLERS = """
func List{model}s(c *gin.Context) {{
\t{lower}sMu.RLock()
\tdefer {lower}sMu.RUnlock()
\titems := make([]{model}, 0, len({lower}s))
\tfor _, v := range {lower}s {{
\t\titems = append(items, v)
\t}}
\tc.JSON(http.StatusOK, gin.H{{"data": items, "total": len(items)}})
}}

func Get{model}(c *gin.Context) {{
\t{lower}sMu.RLock()
\tdefer {lower}sMu.RUnlock()
\titem, ok := {lower}s[c.Param("id")]
\tif !ok {{
\t\tc.JSON(http.StatusNotFound, gin.H{{"error": "{model} not found"}})
\t\treturn
\t}}
\tc.JSON(http.StatusOK, gin.H{{"data": item}})
}}

func Create{model}(c *gin.Context) {{
\tvar input struct {{
\t\tName string `json:"name" binding:"required"`
\t}}
\tif err := c.ShouldBindJSON(&input); err != nil {{
\t\tc.JSON(http.StatusBadRequest, gin.H{{"error": err.Error()}})
\t\treturn
\t}}
\tnow := time.Now()
\titem := {model}{{ID: uuid.New().String(), Name: input.Name, CreatedAt: now, UpdatedAt: now}}
\t{lower}sMu.Lock()
\t{lower}s[item.ID] = item
\t{lower}sMu.Unlock()
\tc.JSON(http.StatusCreated, gin.H{{"data": item}})
}}

func Delete{model}(c *gin.Context) {{
\t{lower}sMu.Lock()
\tdefer {lower}sMu.Unlock()
\tif _, ok := {lower}s[c.Param("id")]; !ok {{
\t\tc.JSON(http.StatusNotFound, gin.H{{"error": "{model} not found"}})
\t\treturn
\t}}
\tdelete({lower}s, c.Param("id"))
\tc.Status(http.StatusNoContent)
}}
"""

_ECHO_HANDLERS = """
func List{model}s(c echo.Context) error {{
\t{lower}sMu.RLock()
\tdefer {lower}sMu.RUnlock()
\titems := make([]{model}, 0, len({lower}s))
\tfor _, v := range {lower}s {{
\t\titems = append(items, v)
\t}}
\treturn c.JSON(http.StatusOK, map[string]interface{{}}{{"data": items, "total": len(items)}})
}}

func Get{model}(c echo.Context) error {{
\t{lower}sMu.RLock()
\tdefer {lower}sMu.RUnlock()
\titem, ok := {lower}s[c.Param("id")]
\tif !ok {{
\t\treturn c.JSON(http.StatusNotFound, map[string]string{{"error": "{model} not found"}})
\t}}
\treturn c.JSON(http.StatusOK, map[string]interface{{}}{{"data": item}})
}}

func Create{model}(c echo.Context) error {{
\tvar input struct {{
\t\tName string `json:"name"`
\t}}
\tif err := c.Bind(&input); err != nil || input.Name == "" {{
\t\treturn c.JSON(http.StatusBadRequest, map[string]string{{"error": "Name is required"}})
\t}}
\tnow := time.Now()
\titem := {model}{{ID: uuid.New().String(), Name: input.Name, CreatedAt: now, UpdatedAt: now}}
\t{lower}sMu.Lock()
\t{lower}s[item.ID] = item
\t{lower}sMu.Unlock()
\treturn c.JSON(http.StatusCreated, map[string]interface{{}}{{"data": item}})
}}

func Delete{model}(c echo.Context) error {{
\t{lower}sMu.Lock()
\tdefer {lower}sMu.Unlock()
\tif _, ok := {lower}s[c.Param("id")]; !ok {{
\t\treturn c.JSON(http.StatusNotFound, map[string]string{{"error": "{model} not found"}})
\t}}
\tdelete({lower}s, c.Param("id"))
\treturn c.NoContent(http.StatusNoContent)
}}
"""

_AXUM_ROUTES = """\
use axum::{{
    extract::{{Json, Path, State}},
    http::StatusCode,
    response::IntoResponse,
    routing::get,
    Router,
}};
use chrono::{{DateTime, Utc}};
use serde::{{Deserialize, Serialize}};
use std::collections::HashMap;
use std::sync::{{Arc, RwLock}};
use uuid::Uuid;

#[derive(Debug, Clone, Serialize, Deserialize)]
pub struct {model} {{
    pub id: String,
    pub name: String,
    pub created_at: DateTime<Utc>,
    pub updated_at: DateTime<Utc>,
}}

#[derive(Debug, Deserialize)]
pub struct Create{model} {{
    pub name: String,
}}

pub type {model}Store = Arc<RwLock<HashMap<String, {model}>>>;

pub fn {lower}_routes() -> Router<{model}Store> {{
    Router::new()
        .route("/{lower}s", get(list_{lower}s).post(create_{lower}))
        .route("/{lower}s/:id", get(get_{lower}).put(update_{lower}).delete(delete_{lower}))
}}

fn not_found() -> axum::response::Response {{
    (StatusCode::NOT_FOUND, Json(serde_json::json!({{ "error": "{model} not found" }}))).into_response()
}}

async fn list_{lower}s(State(store): State<{model}Store>) -> impl IntoResponse {{
    let items: Vec<{model}> = store.read().unwrap().values().cloned().collect();
    Json(serde_json::json!({{ "data": items, "total": items.len() }}))
}}

async fn get_{lower}(State(store): State<{model}Store>, Path(id): Path<String>) -> impl IntoResponse {{
    match store.read().unwrap().get(&id) {{
        Some(item) => Json(serde_json::json!({{ "data": item }})).into_response(),
        None => not_found(),
    }}
}}

async fn create_{lower}(State(store): State<{model}Store>, Json(input): Json<Create{model}>) -> impl IntoResponse {{
    let now = Utc::now();
    let item = {model} {{ id: Uuid::new_v4().to_string(), name: input.name, created_at: now, updated_at: now }};
    store.write().unwrap().insert(item.id.clone(), item.clone());
    (StatusCode::CREATED, Json(serde_json::json!({{ "data": item }})))
}}

async fn update_{lower}(
    State(store): State<{model}Store>,
    Path(id): Path<String>,
    Json(input): Json<Create{model}>,
) -> impl IntoResponse {{
    let mut store = store.write().unwrap();
    match store.get_mut(&id) {{
        Some(item) => {{
            item.name = input.name;
            item.updated_at = Utc::now();
            Json(serde_json::json!({{ "data": item.clone() }})).into_response()
        }}
        None => not_found(),
    }}
}}

async fn delete_{lower}(State(store): State<{model}Store>, Path(id): Path<String>) -> impl IntoResponse {{
    match store.write().unwrap().remove(&id) {{
        Some(_) => StatusCode::NO_CONTENT.into_response(),
        None => not_found(),
    }}
}}
"""


class ApiRoutesStrategy(EnrichmentStrategy):
    """In-memory CRUD routes for one seeded model name."""

    id = "enrich-api-routes"
    name = "API Route Logic Fill"
    priority = 20

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.fill_logic) and stack.archetype == "backend"

    async def apply(self, context: EnrichmentContext) -> None:
        stack, files = context.stack, context.files
        model = context.rng.pick(MODEL_NAMES)
        lower = model.lower()
        values = {"model": model, "lower": lower}

        match stack.language:
            case "typescript":
                template = _NEST_ROUTES if stack.framework == "nestjs" else _EXPRESS_ROUTES
                files[f"src/routes/{lower}s.ts"] = template.format(**values)
            case "python":
                pkg = package_name(context.project_name)
                template = _FASTAPI_ROUTES if stack.framework == "fastapi" else _FLASK_ROUTES
                files.setdefault(f"{pkg}/routes/__init__.py", "")
                files[f"{pkg}/routes/{lower}s.py"] = template.format(**values)
            case "go" if stack.framework in ("gin", "echo"):
                module = "github.com/gin-gonic/gin" if stack.framework == "gin" else "github.com/labstack/echo/v4"
                handlers = _GIN_HANDLERS if stack.framework == "gin" else _ECHO_HANDLERS
                files[f"internal/handlers/{lower}s.go"] = (
                    _GO_ROUTES_HEADER.format(module=module, **values) + handlers.format(**values)
                )
            case "rust" if stack.framework == "axum":
                files[f"src/routes/{lower}s.rs"] = _AXUM_ROUTES.format(**values)
            case _:
                logger.debug("No route templates for %s/%s", stack.language, stack.framework)
                return
        logger.debug("Filled %s routes for %s", model, context.project_name)


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

_TS_MIDDLEWARE = """\
import type { Request, Response, NextFunction } from 'express';

/** Log method, url, status and duration of each request */
export function requestLogger(req: Request, res: Response, next: NextFunction): void {
  const start = Date.now();
  res.on('finish', () => {
    console.log(`${req.method} ${req.url} ${res.statusCode} ${Date.now() - start}ms`);
  });
  next();
}

/** Global error handler */
export function errorHandler(err: Error, _req: Request, res: Response, _next: NextFunction): void {
  console.error('Unhandled error:', err.message);
  const status = (err as Error & { status?: number }).status ?? 500;
  res.status(status).json({
    error: status === 500 ? 'Internal Server Error' : err.message,
    ...(process.env.NODE_ENV === 'development' && { stack: err.stack }),
  });
}

export function healthCheck(_req: Request, res: Response): void {
  res.json({ status: 'ok', timestamp: new Date().toISOString(), uptime: process.uptime() });
}

/** Register after all routes */
export function notFoundHandler(_req: Request, res: Response): void {
  res.status(404).json({ error: 'Not Found' });
}
"""

_PY_MIDDLEWARE = '''\
"""Request logging and health helpers."""

from __future__ import annotations

import functools
import logging
import time

logger = logging.getLogger(__name__)


def request_logger(func):
    """Log how long the wrapped async handler took."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        start = time.monotonic()
        response = await func(*args, **kwargs)
        logger.info("%s completed in %.1fms", func.__name__, (time.monotonic() - start) * 1000)
        return response

    return wrapper


def health_check() -> dict:
    return {
        "status": "ok",
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
    }
'''

_GO_MIDDLEWARE = """\
package middleware

import (
\t"log"
\t"net/http"
\t"time"
)

// Logger logs each request with method, path, status and duration.
func Logger(next http.Handler) http.Handler {
\treturn http.HandlerFunc(func(w http.ResponseWriter, r *http.Request) {
\t\tstart := time.Now()
\t\twrapped := &responseWriter{ResponseWriter: w, statusCode: http.StatusOK}
\t\tnext.ServeHTTP(wrapped, r)
\t\tlog.Printf("%s %s %d %v", r.Method, r.URL.Path, wrapped.statusCode, time.Since(start))
\t})
}

// Recover turns panics into 500 responses.
func Recover(next http.Handler) http.Handler {
\treturn http.HandlerFunc(func(w http.ResponseWriter, r *http.Request) {
\t\tdefer func() {
\t\t\tif err := recover(); err != nil {
\t\t\t\tlog.Printf("panic recovered: %v", err)
\t\t\t\thttp.Error(w, "Internal Server Error", http.StatusInternalServerError)
\t\t\t}
\t\t}()
\t\tnext.ServeHTTP(w, r)
\t})
}

// CORS adds permissive cross-origin headers.
func CORS(next http.Handler) http.Handler {
\treturn http.HandlerFunc(func(w http.ResponseWriter, r *http.Request) {
\t\tw.Header().Set("Access-Control-Allow-Origin", "*")
\t\tw.Header().Set("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
\t\tw.Header().Set("Access-Control-Allow-Headers", "Content-Type, Authorization")
\t\tif r.Method == http.MethodOptions {
\t\t\tw.WriteHeader(http.StatusNoContent)
\t\t\treturn
\t\t}
\t\tnext.ServeHTTP(w, r)
\t})
}

type responseWriter struct {
\thttp.ResponseWriter
\tstatusCode int
}

func (rw *responseWriter) WriteHeader(code int) {
\trw.statusCode = code
\trw.ResponseWriter.WriteHeader(code)
}
"""


class MiddlewareStrategy(EnrichmentStrategy):
    id = "enrich-middleware"
    name = "Middleware Enrichment"
    priority = 22

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.fill_logic) and stack.archetype == "backend"

    async def apply(self, context: EnrichmentContext) -> None:
        match context.stack.language:
            case "typescript":
                context.files["src/middleware/index.ts"] = _TS_MIDDLEWARE
            case "python":
                context.files[f"{package_name(context.project_name)}/middleware.py"] = _PY_MIDDLEWARE
            case "go":
                context.files["internal/middleware/middleware.go"] = _GO_MIDDLEWARE
            case language:
                logger.debug("No middleware templates for %s", language)


# ---------------------------------------------------------------------------
# Web components
# ---------------------------------------------------------------------------

_NAV_STYLE = "display: flex; justify-content: space-between; align-items: center;"
_FOOTER_STYLE = (
    "padding: 1rem 2rem; border-top: 1px solid #e2e8f0; text-align: center; color: #64748b; font-size: 0.875rem;"
)

_REACT_HEADER = """\
interface HeaderProps {{
  title?: string;
}}

export function Header({{ title = '{project_name}' }}: HeaderProps) {{
  return (
    <header style={{{{ padding: '1rem 2rem', borderBottom: '1px solid #e2e8f0' }}}}>
      <nav style={{{{ display: 'flex', justifyContent: 'space-between', alignItems: 'center' }}}}>
        <h1 style={{{{ fontSize: '1.25rem', fontWeight: 'bold' }}}}>{{title}}</h1>
        <ul style={{{{ display: 'flex', gap: '1rem', listStyle: 'none', margin: 0, padding: 0 }}}}>
          <li><a href="/">Home</a></li>
          <li><a href="/about">About</a></li>
        </ul>
      </nav>
    </header>
  );
}}
"""

_REACT_FOOTER = """\
export function Footer() {{
  const year = new Date().getFullYear();

  return (
    <footer style={{{{ padding: '1rem 2rem', borderTop: '1px solid #e2e8f0', textAlign: 'center' }}}}>
      <p style={{{{ color: '#64748b', fontSize: '0.875rem' }}}}>
        &copy; {{year}} {project_name}. All rights reserved.
      </p>
    </footer>
  );
}}
"""

_REACT_LAYOUT = """\
import type {{ ReactNode }} from 'react';
import {{ Header }} from './Header';
import {{ Footer }} from './Footer';

interface LayoutProps {{
  children: ReactNode;
}}

export function Layout({{ children }}: LayoutProps) {{
  return (
    <div style={{{{ minHeight: '100vh', display: 'flex', flexDirection: 'column' }}}}>
      <Header />
      <main style={{{{ flex: 1, padding: '2rem' }}}}>{{children}}</main>
      <Footer />
    </div>
  );
}}
"""

_VUE_HEADER = """\
<script setup lang="ts">
defineProps<{{ title?: string }}>();
</script>

<template>
  <header class="header">
    <nav class="nav">
      <h1 class="title">{{{{ title ?? '{project_name}' }}}}</h1>
      <ul class="links">
        <li><RouterLink to="/">Home</RouterLink></li>
        <li><RouterLink to="/about">About</RouterLink></li>
      </ul>
    </nav>
  </header>
</template>

<style scoped>
.header {{ padding: 1rem 2rem; border-bottom: 1px solid #e2e8f0; }}
.nav {{ {nav_style} }}
.title {{ font-size: 1.25rem; font-weight: bold; }}
.links {{ display: flex; gap: 1rem; list-style: none; margin: 0; padding: 0; }}
</style>
"""

_VUE_FOOTER = """\
<template>
  <footer class="footer">
    <p>&copy; {{{{ year }}}} {project_name}. All rights reserved.</p>
  </footer>
</template>

<script setup lang="ts">
const year = new Date().getFullYear();
</script>

<style scoped>
.footer {{ {footer_style} }}
</style>
"""

_SVELTE_HEADER = """\
<script lang="ts">
  export let title = '{project_name}';
</script>

<header>
  <nav>
    <h1>{{title}}</h1>
    <ul>
      <li><a href="/">Home</a></li>
      <li><a href="/about">About</a></li>
    </ul>
  </nav>
</header>

<style>
  header {{ padding: 1rem 2rem; border-bottom: 1px solid #e2e8f0; }}
  nav {{ {nav_style} }}
  h1 {{ font-size: 1.25rem; font-weight: bold; }}
  ul {{ display: flex; gap: 1rem; list-style: none; margin: 0; padding: 0; }}
</style>
"""

_SVELTE_FOOTER = """\
<footer>
  <p>&copy; {{new Date().getFullYear()}} {project_name}. All rights reserved.</p>
</footer>

<style>
  footer {{ {footer_style} }}
</style>
"""

_COMPONENT_SETS: dict[str, dict[str, str]] = {
    "react": {
        "src/components/Header.tsx": _REACT_HEADER,
        "src/components/Footer.tsx": _REACT_FOOTER,
        "src/components/Layout.tsx": _REACT_LAYOUT,
    },
    "vue": {
        "src/components/AppHeader.vue": _VUE_HEADER,
        "src/components/AppFooter.vue": _VUE_FOOTER,
    },
    "svelte": {
        "src/lib/components/Header.svelte": _SVELTE_HEADER,
        "src/lib/components/Footer.svelte": _SVELTE_FOOTER,
    },
}

_COMPONENT_FAMILY = {
    "react": "react",
    "nextjs": "react",
    "solid": "react",
    "vue": "vue",
    "nuxt": "vue",
    "svelte": "svelte",
    "sveltekit": "svelte",
}


class WebComponentsStrategy(EnrichmentStrategy):
    """Header, footer and (for JSX) layout components."""

    id = "enrich-web-components"
    name = "Web Component Logic Fill"
    priority = 20

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None) -> bool:
        return bool(flags and flags.fill_logic) and stack.archetype == "web"

    async def apply(self, context: EnrichmentContext) -> None:
        family = _COMPONENT_FAMILY.get(context.stack.framework)
        if family is None:
            logger.debug("No component templates for %s", context.stack.framework)
            return
        for path, template in _COMPONENT_SETS[family].items():
            context.files[path] = template.format(
                project_name=context.project_name, nav_style=_NAV_STYLE, footer_style=_FOOTER_STYLE
            )
