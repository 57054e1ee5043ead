"""
CLI integration for macro expansion.

Provides the ``expand``, ``check``, ``list-macros`` and ``macro-info``
subcommands.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from . import (
    ConfigError,
    ConfigManager,
    MacroConfig,
    MacroRegistry,
    RegistryError,
    SourceExpander,
    SourceExpansion,
    build_default_registry,
    load_config,
)
from ..logging_config import get_logger
from ..utils import SourceLoaderError, load_source

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich consoles
console = Console()
err_console = Console(stderr=True)


def _add_input_args(parser: argparse.ArgumentParser):
    """Add the mutually exclusive input source options."""
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("file", nargs="?", help="Swift file to expand")
    input_group.add_argument("--url", help="URL to fetch Swift source from")
    input_group.add_argument(
        "--stdin", action="store_true", help="Read Swift source from standard input"
    )


def _add_generation_args(parser: argparse.ArgumentParser):
    """Add options that shape the generated declarations."""
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")

    parser.add_argument(
        "--platform",
        metavar="TARGET",
        help="Build target, e.g. ios, macos, tvos (default: host platform)",
    )

    marker_group = parser.add_mutually_exclusive_group()
    marker_group.add_argument(
        "--persistence-marker",
        dest="emit_persistence_marker",
        action="store_const",
        const=True,
        default=None,
        help="Mark generated fields @Transient unless the attribute says otherwise",
    )
    marker_group.add_argument(
        "--no-persistence-marker",
        dest="emit_persistence_marker",
        action="store_const",
        const=False,
        help="Leave generated fields unmarked unless the attribute says otherwise",
    )

    parser.add_argument("--indent", type=int, metavar="N", help="Spaces per indent level")
    parser.add_argument("--tabs", action="store_true", help="Indent with tabs")


def create_codegen_subparsers(subparsers):
    """
    Register the code generation subcommands.

    Args:
        subparsers: Subparser group from the main parser
    """
    expand_parser = subparsers.add_parser(
        "expand",
        help="Expand macro attributes in Swift source",
        description="Expand @ImageCache and other registered attributes in Swift source",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  imagecache expand Profile.swift --platform ios
  imagecache expand Profile.swift -o Profile.expanded.swift
  imagecache expand --stdin --platform macos < Profile.swift
        """.strip(),
    )
    _add_input_args(expand_parser)
    expand_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    _add_generation_args(expand_parser)
    expand_parser.add_argument(
        "--verbose", action="store_true", help="Show expansion metadata"
    )
    expand_parser.set_defaults(func=handle_expand_command)

    check_parser = subparsers.add_parser(
        "check",
        help="Report macro diagnostics without writing output",
    )
    _add_input_args(check_parser)
    _add_generation_args(check_parser)
    check_parser.set_defaults(func=handle_check_command)

    list_parser = subparsers.add_parser("list-macros", help="List registered macros")
    list_parser.set_defaults(func=handle_list_macros)

    info_parser = subparsers.add_parser("macro-info", help="Show details about a macro")
    info_parser.add_argument("name", help="Macro attribute name, e.g. ImageCache")
    _add_generation_args(info_parser)
    info_parser.set_defaults(func=handle_macro_info)


def handle_expand_command(
    args: argparse.Namespace, registry: Optional[MacroRegistry] = None
) -> int:
    """
    Expand a Swift source and write or print the result.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        expansion = _run_expansion(args, registry)
    except CLIError as e:
        err_console.print(f"[red]✗ Error:[/red] {e}", soft_wrap=True)
        return 1

    if not expansion.success:
        _print_diagnostics(expansion)
        return 1

    output_file = getattr(args, "output", None)
    if output_file:
        output_path = Path(output_file)
        try:
            output_path.write_text(expansion.source, encoding="utf-8")
        except OSError as e:
            err_console.print(f"[red]✗ Failed to write to {output_path}:[/red] {e}")
            return 1
        err_console.print(
            f"[green]✓[/green] Expanded {expansion.expanded_count} declaration(s) "
            f"into [cyan]{output_path}[/cyan]",
            soft_wrap=True,
        )
    elif console.is_terminal:
        console.print(Syntax(expansion.source, "swift", theme="monokai"))
    else:
        sys.stdout.write(expansion.source)
        if not expansion.source.endswith("\n"):
            sys.stdout.write("\n")

    if getattr(args, "verbose", False):
        _print_metadata(expansion)

    return 0


def handle_check_command(
    args: argparse.Namespace, registry: Optional[MacroRegistry] = None
) -> int:
    """Validate every macro use in a source and report diagnostics."""
    try:
        expansion = _run_expansion(args, registry)
    except CLIError as e:
        err_console.print(f"[red]✗ Error:[/red] {e}", soft_wrap=True)
        return 1

    if not expansion.success:
        _print_diagnostics(expansion)
        return 1

    console.print(
        f"[green]✓[/green] {expansion.source_name}: "
        f"{expansion.expanded_count} macro use(s), no diagnostics",
        soft_wrap=True,
    )
    return 0


def handle_list_macros(
    args: argparse.Namespace, registry: Optional[MacroRegistry] = None
) -> int:
    """List registered macros with details."""
    registry = registry or build_default_registry()
    names = registry.list_macros()

    if not names:
        console.print("[yellow]⚠️ No macros registered[/yellow]")
        return 0

    table = Table(title="📋 Registered Macros", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Macro", style="bold green", no_wrap=True)
    table.add_column("Role", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for name in names:
        info = registry.get_macro_info(name)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"@{name}", info["role"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    return 0


def handle_macro_info(
    args: argparse.Namespace, registry: Optional[MacroRegistry] = None
) -> int:
    """Show detailed information about a specific macro."""
    registry = registry or build_default_registry()

    try:
        info = registry.get_macro_info(args.name)
        generator = registry.create_generator(args.name, _build_config(args))
    except (RegistryError, CLIError) as e:
        err_console.print(f"[red]✗ {e}[/red]", soft_wrap=True)
        err_console.print("[dim]Use list-macros to see available options[/dim]")
        return 1

    info_text = (
        f"[bold]Macro:[/bold] @{info['name']}\n"
        f"[bold]Role:[/bold] {info['role']}\n"
        f"[bold]Generator Class:[/bold] {info['class']}\n"
        f"[bold]Module:[/bold] {info['module']}"
    )
    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(Panel(info_text, title=f"🔧 @{info['name']}", border_style="green"))

    config_table = Table(
        title="⚙️  Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")
    for key, value in generator.describe_configuration().items():
        config_table.add_row(key, str(value))

    console.print()
    console.print(config_table)
    return 0


def _run_expansion(
    args: argparse.Namespace, registry: Optional[MacroRegistry]
) -> SourceExpansion:
    source_name, source = _get_input_source(args)
    config = _build_config(args)

    warnings = _validate_config(config)
    for warning in warnings:
        err_console.print(f"[yellow]⚠️  {warning}[/yellow]", soft_wrap=True)

    expander = SourceExpander(registry or build_default_registry(), config)
    return expander.expand(source, source_name)


def _get_input_source(args: argparse.Namespace):
    """Get Swift source from the selected input."""
    try:
        if getattr(args, "file", None):
            return load_source(file_path=args.file)
        if getattr(args, "url", None):
            return load_source(url=args.url)
        if getattr(args, "stdin", False):
            return "<stdin>", sys.stdin.read()
    except (SourceLoaderError, FileNotFoundError) as e:
        raise CLIError(f"Failed to load input: {e}") from e
    raise CLIError("Input source required (file, --url, or --stdin)")


def _build_config(args: argparse.Namespace) -> MacroConfig:
    """Build configuration from a config file and CLI overrides."""
    overrides: Dict[str, Any] = {}

    if getattr(args, "platform", None):
        overrides["target_platform"] = args.platform

    if getattr(args, "emit_persistence_marker", None) is not None:
        overrides["emit_persistence_marker"] = args.emit_persistence_marker

    if getattr(args, "indent", None):
        overrides["indent_size"] = args.indent

    if getattr(args, "tabs", False):
        overrides["use_tabs"] = True

    try:
        return load_config(
            "ImageCache",
            custom_config=overrides,
            config_file=getattr(args, "config", None),
        )
    except (ConfigError, TypeError) as e:
        raise CLIError(f"Configuration error: {e}") from e


def _validate_config(config: MacroConfig):
    return ConfigManager().validate_config(config)


def _print_diagnostics(expansion: SourceExpansion):
    for diagnostic in expansion.diagnostics:
        err_console.print(
            f"[bold]{diagnostic.source_name}:{diagnostic.line}:{diagnostic.column}:[/bold] "
            f"[red]error:[/red] {diagnostic.message}",
            soft_wrap=True,
            highlight=False,
            emoji=False,
        )
        logger.debug("Diagnostic %s: %s", diagnostic.kind, diagnostic.message)

    err_console.print(
        f"[red]✗[/red] {len(expansion.diagnostics)} diagnostic(s), no output written",
        soft_wrap=True,
    )


def _print_metadata(expansion: SourceExpansion):
    metadata_table = Table(
        title="📊 Expansion Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Line", style="bold")
    metadata_table.add_column("Macro", style="green")
    metadata_table.add_column("Peers", style="cyan")

    for result in expansion.expansions:
        metadata_table.add_row(
            str(result.metadata.get("line", "")),
            f"@{result.metadata.get('attribute', '')}",
            str(result.metadata.get("peer_count", 0)),
        )

    err_console.print()
    err_console.print(metadata_table)
