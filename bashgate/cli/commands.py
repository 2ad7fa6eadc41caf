"""CLI commands for bashgate."""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from bashgate import __version__, __logo__
from bashgate.config.loader import get_config_path, load_config, save_config, convert_to_camel
from bashgate.config.schema import Config
from bashgate.gate.engine import CommandGate
from bashgate.gate.hook import run_hook
from bashgate.gate.rules import (
    RuleConfigError,
    dump_rule_file,
    load_rules,
    read_default_rule_file,
    compile_rules,
)
from bashgate.gate.types import RULE_TIERS

app = typer.Typer(
    name="bashgate",
    help=f"{__logo__} bashgate - destructive-command safety gate",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

TIER_STYLES = {
    "allow": "green",
    "ask": "yellow",
    "deny": "bold red",
    "safe": "green",
    "risky": "yellow",
    "dangerous": "bold red",
}


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} bashgate v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """bashgate - destructive-command safety gate."""
    pass


def _setup_logging(level: str) -> None:
    # stdout is the host response channel; logs go to stderr only
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> bashgate: {message}")


def _load_config(config_path: Path | None) -> Config:
    config = load_config(config_path)
    _setup_logging(config.logging.level)
    return config


def _build_gate(config: Config) -> CommandGate:
    """Load rule tables, exiting loudly if they are invalid."""
    try:
        rules = load_rules(config.rules_path, include_defaults=config.rules.include_defaults)
    except RuleConfigError as e:
        err_console.print(f"[red]bashgate: invalid rule configuration[/red]\n{e}")
        raise typer.Exit(1)
    return CommandGate(rules, normalize_binaries=config.hook.normalize_binaries)


# ============================================================================
# Hook Commands
# ============================================================================


@app.command()
def hook(config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json")):
    """Handle one PreToolUse request from stdin (host entry point)."""
    config = _load_config(config_path)
    gate = _build_gate(config)
    status = run_hook(sys.stdin, sys.stdout, gate, shell_tools=config.hook.shell_tools)
    raise typer.Exit(status)


@app.command()
def check(
    command: str = typer.Argument(..., help="Shell command to classify (never executed)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """Show how a command would be classified."""
    config = _load_config(config_path)
    gate = _build_gate(config)
    decision = gate.evaluate(command)

    style = TIER_STYLES[decision.tier]
    console.print(f"[{style}]{decision.tier.upper()}[/{style}]  {decision.original_command}")
    if decision.normalized_command != decision.original_command:
        console.print(f"  normalized: {decision.normalized_command}")
    if decision.rule_name:
        console.print(f"  rule: {decision.rule_name}")
    if decision.reason:
        console.print(f"  reason: {decision.reason}")


@app.command()
def snippet():
    """Print the settings.json hook stanza for Claude Code."""
    stanza = {
        "hooks": {
            "PreToolUse": [
                {
                    "matcher": "Bash",
                    "hooks": [{"type": "command", "command": "bashgate hook"}],
                }
            ]
        }
    }
    console.print_json(json.dumps(stanza))


# ============================================================================
# Rules Commands
# ============================================================================

rules_app = typer.Typer(help="Inspect and validate rule tables")
app.add_typer(rules_app, name="rules")


@rules_app.command("list")
def rules_list(
    tier: Optional[str] = typer.Option(None, "--tier", "-t", help="safe, dangerous or risky"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """List the active rules in evaluation order."""
    if tier is not None and tier not in RULE_TIERS:
        err_console.print(f"[red]Unknown tier: {tier}[/red] (expected one of {', '.join(RULE_TIERS)})")
        raise typer.Exit(1)

    config = _load_config(config_path)
    gate = _build_gate(config)

    table = Table(title="bashgate rules")
    table.add_column("Tier")
    table.add_column("Name", style="cyan")
    table.add_column("Reason")

    for rule in gate.rules:
        if tier and rule.tier != tier:
            continue
        style = TIER_STYLES[rule.tier]
        table.add_row(f"[{style}]{rule.tier}[/{style}]", rule.name, rule.reason)

    console.print(table)


@rules_app.command("validate")
def rules_validate(
    path: Optional[Path] = typer.Argument(None, help="Rules file (default: the configured file)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """Compile a rules file and report errors."""
    config = _load_config(config_path)
    target = path or config.rules_path
    try:
        if target:
            rules = load_rules(target, include_defaults=config.rules.include_defaults)
        else:
            rules = compile_rules(read_default_rule_file())
    except RuleConfigError as e:
        err_console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]✓[/green] {len(rules)} rules OK "
        f"(safe={len(rules.safe)}, dangerous={len(rules.dangerous)}, risky={len(rules.risky)})"
    )


@rules_app.command("export")
def rules_export(
    path: Optional[Path] = typer.Argument(None, help="Write to this file instead of stdout"),
):
    """Export the shipped rule table as an editable rules file."""
    data = dump_rule_file(compile_rules(read_default_rule_file()))
    text = json.dumps(data, indent=2) + "\n"

    if path is None:
        sys.stdout.write(text)
        return

    if path.exists() and not typer.confirm(f"{path} exists. Overwrite?"):
        raise typer.Exit()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote rules to {path}")


# ============================================================================
# Config Commands
# ============================================================================

config_app = typer.Typer(help="Manage configuration")
app.add_typer(config_app, name="config")


@config_app.command("init")
def config_init(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
):
    """Write a default config.json."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)

    save_config(Config(), path)
    console.print(f"[green]✓[/green] Created config at {path}")


@config_app.command("show")
def config_show(config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.json")):
    """Print the effective configuration."""
    config = _load_config(config_path)
    console.print_json(json.dumps(convert_to_camel(config.model_dump())))
