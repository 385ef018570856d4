"""
Command-line interface for table_mapper.

Commands:
    generate     Generate sources and mapping documents from a schema document
    plugins      List registered checkpoint plugins
    init-config  Write an example configuration file
"""

import argparse
import logging
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .codegen import ArtifactWriter, ExtensionPipeline, get_registry
from .codegen.core.config import EXAMPLE_CONFIG, ConfigManager, load_config
from .codegen.core.errors import ConfigValidationError, TableMapperError
from .introspection import load_tables
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)

console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="table-mapper",
        description="Generate Java record types, mapper interfaces and XML mapping documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  table-mapper generate schema.json --config mapper.json --output-dir src/main
  table-mapper generate https://example.com/schema.json --config mapper.json --dry-run
  table-mapper plugins
  table-mapper init-config mapper.json
        """.strip(),
    )
    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Generate artifacts from a schema document")
    generate.add_argument("schema", help="Schema document (JSON file or URL)")
    generate.add_argument("--config", "-c", help="Configuration file path (JSON)")
    generate.add_argument(
        "--output-dir", "-o", default="generated",
        help="Output root directory (default: generated)",
    )
    generate.add_argument("--workers", "-w", type=int, help="Number of tables processed concurrently")
    generate.add_argument(
        "--dry-run", action="store_true", help="Render everything but write nothing",
    )
    generate.add_argument(
        "--verbose", "-v", action="store_true", help="Debug logging and generation metadata",
    )
    generate.set_defaults(func=_handle_generate)

    plugins = subparsers.add_parser("plugins", help="List registered checkpoint plugins")
    plugins.set_defaults(func=_handle_plugins)

    init_config = subparsers.add_parser("init-config", help="Write an example configuration file")
    init_config.add_argument("output", help="Path of the configuration file to write")
    init_config.set_defaults(func=_handle_init_config)

    return parser


def _handle_generate(args: argparse.Namespace) -> int:
    overrides = {}
    if args.workers is not None:
        overrides["workers"] = args.workers
    config = load_config(custom_config=overrides, config_file=args.config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        load_task = progress.add_task("[cyan]Reading schema...", total=None)
        tables = load_tables(args.schema)
        logger.debug(f"Loaded {len(tables)} tables from {args.schema}")
        progress.remove_task(load_task)

        gen_task = progress.add_task(f"[green]Generating {len(tables)} tables...", total=None)
        result = ExtensionPipeline(config).run(tables)
        progress.remove_task(gen_task)

    writer = ArtifactWriter(args.output_dir, dry_run=args.dry_run)
    written = writer.write(result.files)

    _print_files(result.files, writer, args.dry_run)

    if args.verbose and result.metadata:
        _print_metadata(result.metadata)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")

    if result.failures:
        console.print("\n[red]✗ Failed tables:[/red]")
        for table, error in result.failures.items():
            console.print(f"  [red]•[/red] {table}: {error}")
        return 1

    verb = "Would write" if args.dry_run else "Wrote"
    console.print(f"\n[green]✓[/green] {verb} {len(written)} files to [cyan]{writer.output_dir}[/cyan]")
    return 0


def _print_files(files, writer: ArtifactWriter, dry_run: bool) -> None:
    table = Table(
        title="📄 Dry Run" if dry_run else "📄 Generated Files",
        box=box.ROUNDED,
        title_style="bold cyan",
    )
    table.add_column("Table", style="bold green", no_wrap=True)
    table.add_column("Artifact", style="cyan")
    table.add_column("Path", style="dim")

    for rendered in files:
        table.add_row(rendered.table, rendered.role.value, str(writer.target_for(rendered)))

    console.print()
    console.print(table)


def _print_metadata(metadata) -> None:
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def _handle_plugins(args: argparse.Namespace) -> int:
    registry = get_registry()
    names = registry.list_plugins()

    if not names:
        console.print("[yellow]⚠️ No plugins registered[/yellow]")
        return 0

    table = Table(title="🔌 Checkpoint Plugins", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Plugin", style="bold green", no_wrap=True)
    table.add_column("Description")
    table.add_column("Class", style="dim")
    table.add_column("Aliases", style="blue")

    for name in names:
        info = registry.get_plugin_info(name)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(name, info["description"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            '[bold]Enable:[/bold] "plugins": [{"name": "[cyan]PLUGIN[/cyan]", "options": {...}}] '
            "in the configuration file",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _handle_init_config(args: argparse.Namespace) -> int:
    output = Path(args.output)
    if output.exists():
        raise CLIError(f"{output} already exists")
    manager = ConfigManager()
    manager.save_config(manager.get_config(custom_config=EXAMPLE_CONFIG), output)
    console.print(f"[green]✓[/green] Example configuration saved to [cyan]{output}[/cyan]")
    return 0


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    configure_logging(logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING)

    try:
        return args.func(args)
    except ConfigValidationError as e:
        console.print("[red]✗ Invalid configuration:[/red]")
        for error in e.errors:
            console.print(f"  [red]•[/red] {error}")
        return 1
    except (CLIError, TableMapperError, FileNotFoundError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except OSError as e:
        console.print(f"[red]✗ I/O error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
