"""Rust strategies: clap CLIs."""

from __future__ import annotations

from upg.engine.strategy import GenerationContext, GenerationStrategy
from upg.models import EnrichmentFlags, TechStack

_CARGO_TEMPLATE = """\
[package]
name = "{project_name}"
version = "0.1.0"
edition = "2021"
license = "MIT"

[dependencies]
clap = {{ version = "4.5", features = ["derive"] }}
"""

_CLAP_MAIN_TEMPLATE = """\
use clap::{{Parser, Subcommand}};

#[derive(Parser)]
#[command(name = "{project_name}", version, about = "{project_name} command-line tool")]
struct Cli {{
    #[command(subcommand)]
    command: Commands,
}}

#[derive(Subcommand)]
enum Commands {{
    /// Print a greeting
    Greet {{
        #[arg(default_value = "world")]
        name: String,
        #[arg(long)]
        shout: bool,
    }},
}}

fn greeting(name: &str, shout: bool) -> String {{
    let message = format!("Hello, {{}}!", name);
    if shout {{ message.to_uppercase() }} else {{ message }}
}}

fn main() {{
    let cli = Cli::parse();
    match cli.command {{
        Commands::Greet {{ name, shout }} => println!("{{}}", greeting(&name, shout)),
    }}
}}

#[cfg(test)]
mod tests {{
    use super::*;

    #[test]
    fn greets_loudly() {{
        assert_eq!(greeting("upg", true), "HELLO, UPG!");
    }}
}}
"""


class ClapStrategy(GenerationStrategy):
    id = "rust-clap"
    name = "Rust clap CLI"
    priority = 10

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "rust" and stack.framework == "clap"

    async def apply(self, context: GenerationContext) -> None:
        context.files["Cargo.toml"] = _CARGO_TEMPLATE.format(project_name=context.project_name)
        context.files["src/main.rs"] = _CLAP_MAIN_TEMPLATE.format(project_name=context.project_name)


RUST_STRATEGIES: tuple[GenerationStrategy, ...] = (ClapStrategy(),)
