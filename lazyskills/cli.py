"""CLI interface for lazyskills."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lazyskills import __version__

console = Console()
# stdout belongs to the MCP transport while serving
err_console = Console(stderr=True)

SAMPLE_SKILL = """\
---
name: example-skill
description: Example skill showing the SKILL.md format. Call it to see how skills are written.
---
# Example Skill

Everything below the front matter is returned when this skill is invoked.
Listings only show the name and description above.

Add `type: executable` together with `allowed_tools` and `execution_logic`
(conditional, sequential or parallel) to get generated instructions instead.
"""


def _load_settings(config: str):
    from lazyskills.config import load_config
    from lazyskills.utils import setup_logging

    cfg = load_config(config)
    setup_logging(cfg.log_level, cfg.log_format)
    return cfg


@click.group()
@click.version_option(version=__version__, prog_name="lazyskills")
def cli():
    """lazyskills - SKILL.md skills and lazy-mcp tools over MCP."""
    pass


@cli.command()
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def serve(config: str):
    """Start the MCP server on stdio."""
    from lazyskills.factory import create_app
    from lazyskills.server import run_stdio

    cfg = _load_settings(config)
    app = create_app(cfg)

    err_console.print(Panel.fit(
        f"[bold green]Starting lazyskills v{__version__}[/]\n"
        f"Skills: {cfg.skills_dir}\n"
        f"Lazy-MCP command: {cfg.lazy_bridge_command}"
    ))

    try:
        asyncio.run(run_stdio(app))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Shutting down...[/]")


@cli.command("skills")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def list_skills(config: str):
    """List the skills found in the skills directory."""
    from lazyskills.skills import SkillRepository

    cfg = _load_settings(config)
    skills = SkillRepository(cfg.skills_dir).load_all()

    if not skills:
        console.print(f"[yellow]No skills found in {cfg.skills_dir}[/]")
        return

    table = Table(title=f"Skills in {cfg.skills_dir}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Logic", no_wrap=True)
    table.add_column("Description")
    table.add_column("Path", style="dim", overflow="fold")

    for skill in skills:
        table.add_row(
            skill.name,
            skill.kind.value,
            skill.execution_logic.value if skill.is_executable else "-",
            skill.description,
            str(skill.source_path),
        )

    console.print(table)


@cli.command()
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def tools(config: str):
    """Print the tool catalog exactly as MCP clients would see it."""
    from lazyskills.factory import create_app

    cfg = _load_settings(config)
    app = create_app(cfg)

    async def run():
        try:
            return await app.composer.build_catalog()
        finally:
            await app.aclose()

    catalog = asyncio.run(run())

    table = Table(title=f"{len(catalog)} tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    for definition in catalog:
        table.add_row(definition.name, definition.description)
    console.print(table)


@cli.command()
@click.argument("name")
@click.option("--query", "-q", default=None, help="Query passed as the 'query' argument")
@click.option("--args", "args_json", default=None, help="Arguments as a JSON object")
@click.option("--config", "-c", default="config.yaml", help="Config file path")
def call(name: str, query: str | None, args_json: str | None, config: str):
    """Invoke one tool and print its response."""
    from lazyskills.errors import LazySkillsError
    from lazyskills.factory import create_app

    arguments = {}
    if args_json:
        try:
            arguments = json.loads(args_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args")
        if not isinstance(arguments, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--args")
    if query is not None:
        arguments["query"] = query

    cfg = _load_settings(config)
    app = create_app(cfg)

    async def run():
        try:
            return await app.router.invoke(name, arguments)
        finally:
            await app.aclose()

    try:
        response = asyncio.run(run())
    except LazySkillsError as e:
        err_console.print(f"[red]{e}[/]")
        raise SystemExit(1)

    for block in response.content:
        if block.get("type") == "text":
            click.echo(block.get("text", ""))
        else:
            console.print_json(json.dumps(block))
    if response.is_error:
        raise SystemExit(1)


@cli.command()
@click.option("--sample", is_flag=True, help="Also create the skills directory with an example skill")
@click.option("--skills-dir", default=None, help="Skills directory for --sample (default: SKILLS_DIR or ~/.skills)")
def init(sample: bool, skills_dir: str | None):
    """Generate default config.yaml."""
    from lazyskills.config import Settings, generate_default_config

    config_path = "config.yaml"

    write_config = True
    if os.path.exists(config_path):
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            console.print("[yellow]Config left unchanged.[/]")
            write_config = False

    if write_config:
        with open(config_path, "w") as f:
            f.write(generate_default_config())
        console.print(f"[green]Created {config_path}[/]")

    if sample:
        root = Path(skills_dir).expanduser() if skills_dir else Settings().skills_dir
        skill_md = root / "example-skill" / "SKILL.md"
        if skill_md.exists():
            console.print(f"[yellow]{skill_md} already exists, not touched.[/]")
        else:
            skill_md.parent.mkdir(parents=True, exist_ok=True)
            skill_md.write_text(SAMPLE_SKILL)
            console.print(f"[green]Created {skill_md}[/]")


if __name__ == "__main__":
    cli()
