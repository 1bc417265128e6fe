# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from wordsprint import configuration
from wordsprint.repository.configuration import CONFIGURATION_REPO
from wordsprint.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _mask(value: Optional[str]) -> str:
    if not value:
        return "None"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}…{value[-4:]}"


def _config_table(title: Optional[str] = None) -> Table:
    config = CONFIGURATION_REPO.get_config()
    url, anon_key = configuration.resolve_supabase_credentials(config)

    table = Table(title=title)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("supabase_url", config["supabase_url"] or "None")
    table.add_row("supabase_anon_key", _mask(config["supabase_anon_key"]))
    table.add_row("sync_debounce_ms", str(config["sync_debounce_ms"]))
    table.add_row("log_level", config["log_level"])
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row(
        "show_header",
        "✓ Enabled" if config.get("show_header", True) else "✗ Disabled",
    )
    table.add_row(
        "cloud sync",
        "✓ Configured" if url and anon_key else "✗ Not configured",
    )
    return table


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    console = Console()
    console.print(_config_table())
    console.print()
    console.print(f"Config file: {configuration.APP_CONFIG_PATH}")
    console.print(
        f"Environment overrides: {configuration.SUPABASE_URL_ENV}, "
        f"{configuration.SUPABASE_ANON_KEY_ENV}"
    )


@app.command("set, s", no_args_is_help=True)
def set(
    supabase_url: Annotated[
        Optional[str], typer.Option("--supabase-url", help="Project URL")
    ] = None,
    remove_supabase_url: Annotated[
        bool, typer.Option("--remove-supabase-url")
    ] = False,
    supabase_anon_key: Annotated[
        Optional[str], typer.Option("--supabase-anon-key", help="Public anon key")
    ] = None,
    remove_supabase_anon_key: Annotated[
        bool, typer.Option("--remove-supabase-anon-key")
    ] = False,
    sync_debounce_ms: Annotated[
        Optional[int],
        typer.Option(
            "--sync-debounce-ms",
            min=0,
            help="Delay before an edited day total is sent to the cloud",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="Directory for data files"),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option("--remove-data-path", help="Go back to the default data directory"),
    ] = False,
    show_header: Annotated[
        Optional[bool],
        typer.Option("--show-header/--no-show-header", help="Print the header"),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    if log_level is not None and log_level.upper() not in (
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
        "CRITICAL",
    ):
        raise typer.BadParameter(f"Unknown log level '{log_level}'")

    CONFIGURATION_REPO.update_config(
        supabase_url=supabase_url,
        remove_supabase_url=remove_supabase_url,
        supabase_anon_key=supabase_anon_key,
        remove_supabase_anon_key=remove_supabase_anon_key,
        sync_debounce_ms=sync_debounce_ms,
        log_level=log_level,
        data_path=data_path,
        remove_data_path=remove_data_path,
        show_header=show_header,
    )

    console = Console()
    console.print("[green]Configuration updated successfully![/green]\n")
    console.print(_config_table("Updated Configuration"))
