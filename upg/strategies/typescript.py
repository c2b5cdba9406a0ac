"""Node strategies: Commander CLIs and Express services, in TypeScript or JavaScript."""

from __future__ import annotations

import json

from upg.engine.strategy import GenerationContext, GenerationStrategy
from upg.models import EnrichmentFlags, TechStack
from upg.strategies.common import service_port

_NODE_LANGUAGES = ("typescript", "javascript")

_TSCONFIG = {
    "compilerOptions": {
        "target": "ES2022",
        "module": "NodeNext",
        "moduleResolution": "NodeNext",
        "outDir": "dist",
        "rootDir": "src",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "declaration": True,
    },
    "include": ["src"],
}

_DATABASE_PACKAGES = {
    "postgres": ("pg", "^8.11.0"),
    "mysql": ("mysql2", "^3.9.0"),
    "sqlite": ("better-sqlite3", "^9.4.0"),
    "mongodb": ("mongodb", "^6.5.0"),
    "redis": ("ioredis", "^5.3.0"),
}

_ORM_PACKAGES = {
    "prisma": ("@prisma/client", "^5.12.0"),
    "drizzle": ("drizzle-orm", "^0.30.0"),
    "typeorm": ("typeorm", "^0.3.20"),
    "sequelize": ("sequelize", "^6.37.0"),
}

_TEST_PACKAGES = {
    "vitest": ("vitest", "^1.5.0"),
    "jest": ("jest", "^29.7.0"),
    "mocha": ("mocha", "^10.4.0"),
}


def _is_typescript(stack: TechStack) -> bool:
    return stack.language == "typescript"


def _package_json(
    context: GenerationContext,
    dependencies: dict[str, str],
    *,
    bin_entry: bool = False,
) -> str:
    stack = context.stack
    typescript = _is_typescript(stack)
    deps = dict(dependencies)
    if stack.database in _DATABASE_PACKAGES:
        name, version = _DATABASE_PACKAGES[stack.database]
        deps[name] = version
    if stack.orm in _ORM_PACKAGES:
        name, version = _ORM_PACKAGES[stack.orm]
        deps[name] = version

    dev_deps: dict[str, str] = {}
    if typescript:
        dev_deps["typescript"] = "^5.4.0"
        dev_deps["@types/node"] = "^20.12.0"
        dev_deps["tsx"] = "^4.7.0"
    test_runner = stack.testing if stack.testing in _TEST_PACKAGES else "vitest"
    name, version = _TEST_PACKAGES[test_runner]
    dev_deps[name] = version

    entry = "dist/index.js" if typescript else "src/index.js"
    scripts = {
        "build": "tsc" if typescript else "echo 'nothing to build'",
        "start": f"node {entry}",
        "dev": "tsx watch src/index.ts" if typescript else "node --watch src/index.js",
        "test": f"{test_runner} run" if test_runner == "vitest" else test_runner,
    }
    manifest: dict = {
        "name": context.project_name,
        "version": "0.1.0",
        "type": "module",
        "main": entry,
        "scripts": scripts,
        "dependencies": dict(sorted(deps.items())),
        "devDependencies": dict(sorted(dev_deps.items())),
        "license": "MIT",
    }
    if bin_entry:
        manifest["bin"] = {context.project_name: entry}
    return json.dumps(manifest, indent=2) + "\n"


_COMMANDER_TEMPLATE = """\
#!/usr/bin/env node
import {{ Command }} from "commander";

const program = new Command();

program
  .name("{project_name}")
  .description("{project_name} command-line tool")
  .version("0.1.0");

program
  .command("greet")
  .argument("[name]", "who to greet", "world")
  .option("--shout", "print in upper case")
  .action((name{name_type}, options{options_type}) => {{
    const message = `Hello, ${{name}}!`;
    console.log(options.shout ? message.toUpperCase() : message);
  }});

program.parse();
"""

_EXPRESS_TEMPLATE = """\
import express from "express";

export const app = express();
app.use(express.json());

app.get("/health", (_req, res) => {{
  res.json({{ status: "ok" }});
}});

const port = Number(process.env.PORT ?? {port});

if (process.env.NODE_ENV !== "test") {{
  app.listen(port, () => {{
    console.log(`{project_name} listening on port ${{port}}`);
  }});
}}
"""


class _NodeStrategy(GenerationStrategy):
    priority = 10
    framework: str = ""

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language in _NODE_LANGUAGES and stack.framework == self.framework

    def _write_common(self, context: GenerationContext) -> str:
        """Write tsconfig when needed and return the source extension."""
        if _is_typescript(context.stack):
            context.files["tsconfig.json"] = json.dumps(_TSCONFIG, indent=2) + "\n"
            return "ts"
        return "js"


class CommanderStrategy(_NodeStrategy):
    id = "node-commander"
    name = "Node Commander CLI"
    framework = "commander"

    async def apply(self, context: GenerationContext) -> None:
        ext = self._write_common(context)
        typescript = ext == "ts"
        context.files["package.json"] = _package_json(
            context, {"commander": "^12.0.0"}, bin_entry=True
        )
        context.files[f"src/index.{ext}"] = _COMMANDER_TEMPLATE.format(
            project_name=context.project_name,
            name_type=": string" if typescript else "",
            options_type=": { shout?: boolean }" if typescript else "",
        )


class ExpressStrategy(_NodeStrategy):
    id = "node-express"
    name = "Node Express Service"
    framework = "express"

    async def apply(self, context: GenerationContext) -> None:
        ext = self._write_common(context)
        deps = {"express": "^4.19.0"}
        if ext == "ts":
            deps["@types/express"] = "^4.17.21"
        context.files["package.json"] = _package_json(context, deps)
        context.files[f"src/index.{ext}"] = _EXPRESS_TEMPLATE.format(
            project_name=context.project_name,
            port=service_port(context.stack),
        )


TYPESCRIPT_STRATEGIES: tuple[GenerationStrategy, ...] = (
    CommanderStrategy(),
    ExpressStrategy(),
)
