"""CLI entry point for buildmix."""

from __future__ import annotations

import json
from pathlib import Path

import click

from .core.errors import MixError


@click.group()
def main() -> None:
    """Pluggable build-configuration generator."""


@main.command()
@click.option("--config", default="buildmix.toml", help="Config file path")
@click.option("--mixfile", default=None, help="Mixfile path override")
@click.option("--group", "groups", multiple=True, help="Only build matching groups (repeatable)")
@click.option("--production", is_flag=True, default=False, help="Production mode")
@click.option("--hot", is_flag=True, default=False, help="Hot module replacement")
@click.option("--watch", is_flag=True, default=False, help="Watch mode")
@click.option("--poll", is_flag=True, default=False, help="Poll for file changes while watching")
@click.option("--output", default="-", help="Write configs to this file ('-' for stdout)")
def build(
    config: str,
    mixfile: str | None,
    groups: tuple[str, ...],
    production: bool,
    hot: bool,
    watch: bool,
    poll: bool,
    output: str,
) -> None:
    """Generate build configs from the mixfile."""
    import asyncio

    from .main import run

    overrides: dict = {}
    if mixfile:
        overrides["mixfile"] = mixfile
    if groups:
        overrides["groups"] = list(groups)
    if production:
        overrides["production"] = True
    if hot:
        overrides["hot"] = True
    if watch:
        overrides["watch"] = True
    if poll:
        overrides["poll"] = True

    try:
        configs = asyncio.run(run(config_path=config, overrides=overrides))
    except MixError as exc:
        raise click.ClickException(str(exc)) from exc

    text = json.dumps(configs, indent=2)
    if output == "-":
        click.echo(text)
    else:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Wrote {len(configs)} config(s) to {output}")


@main.command()
@click.option("--config", default="buildmix.toml", help="Config file path")
def manifest(config: str) -> None:
    """Print the asset manifest, sorted by key."""
    from .core.config import load_settings
    from .manifest import Manifest

    settings = load_settings(config_path=config)
    current = Manifest(
        settings.public_path, settings.manifest_name, root=settings.context_dir
    )
    try:
        data = current.read()
    except MixError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(dict(sorted(data.items())), indent=2))
