#!/usr/bin/env python3
"""Swagger Model Builder - Entry point."""
import importlib
import logging
import sys
import os
from pathlib import Path

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import click
from colorama import Fore, Style, init

from config import app_config
from src.builder import DuplicateSchemaNameError, ModelBuilder
from src.exporter.json_exporter import JsonExporter

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Swagger Model Builder{Fore.CYAN}                ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Python types to api models{Fore.CYAN}           ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def load_target(target: str):
    """Import "package.module:Attr" (Attr may be dotted)."""
    module_name, _, attr_path = target.partition(":")
    if not module_name or not attr_path:
        raise click.BadParameter(f"expected module:attribute, got {target!r}")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}")

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise click.BadParameter(f"{module_name!r} has no attribute {attr_path!r}")
    return obj


def print_summary(builder: ModelBuilder):
    """Print models and their properties."""
    click.echo(f"{Fore.GREEN}Models: {len(builder.models)}\n")
    for name in sorted(builder.models):
        model = builder.models[name]
        click.echo(f"{Fore.CYAN}📦 {name}{Style.RESET_ALL}  ({len(model.properties)} properties)")
        for prop_name in sorted(model.properties):
            prop = model.properties[prop_name]
            if prop.ref:
                shape = f"{Fore.YELLOW}→ {prop.ref}"
            elif prop.is_array():
                shape = f"array of {prop.items.ref or prop.items.type}"
            else:
                shape = prop.type + (f" ({prop.format})" if prop.format else "")
            marker = "*" if prop_name in model.required else " "
            click.echo(f"  {marker} {prop_name}: {shape}")
        click.echo()


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Swagger Model Builder - Derive api models from Python types."""
    logging.basicConfig(level=getattr(logging, app_config.log_level.upper(), logging.WARNING))


@cli.command()
@click.argument("targets", nargs=-1, required=True)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on model name collisions (also enabled by SWAGGER_STRICT_NAMES)",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    help="Write the models as JSON to this file",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print JSON instead of a summary",
)
def models(targets, strict, output, as_json):
    """Build models for TARGETS given as module:Type."""
    strict = strict or app_config.builder.strict_names

    builder = ModelBuilder(strict=strict)
    exporter = JsonExporter(indent=app_config.json_indent)

    try:
        for target in targets:
            builder.add_model_from(load_target(target))
    except DuplicateSchemaNameError as e:
        click.echo(f"{Fore.RED}❌ {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(exporter.export_string(builder))
    else:
        print_banner()
        print_summary(builder)

    if output:
        exporter.export(Path(output), builder)
        if not as_json:
            click.echo(f"{Fore.GREEN}✅ Models saved to {output}")


if __name__ == "__main__":
    cli()
