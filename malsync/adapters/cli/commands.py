"""
Commandes CLI de synchronisation et d'inspection des chaines de suites.
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from malsync.adapters.cli.helpers import console, suppress_loguru, with_container
from malsync.core.entities.media import MediaKind


def sync(
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Calcule les mises a jour sans les ecrire"),
    ] = False,
    batch_size: Annotated[
        Optional[int],
        typer.Option("--batch-size", "-b", min=1, help="Nombre de fiches par lot"),
    ] = None,
    pause: Annotated[
        Optional[float],
        typer.Option("--pause", "-p", min=0, help="Pause entre deux lots (secondes)"),
    ] = None,
) -> None:
    """Synchronise le catalogue Notion avec MyAnimeList."""
    asyncio.run(_sync_async(dry_run, batch_size, pause))


@with_container()
async def _sync_async(
    container,
    dry_run: bool,
    batch_size: Optional[int],
    pause: Optional[float],
) -> None:
    """Implementation async de la commande sync."""
    from malsync.services.sync import ProgressInfo, SyncOutcome

    config = container.config()
    if not config.notion_enabled:
        console.print(
            "[red]Catalogue Notion non configure[/red] "
            "(MALSYNC_NOTION_API_KEY et MALSYNC_NOTION_DATABASE_ID)"
        )
        raise typer.Exit(code=1)
    if not config.search_enabled:
        console.print(
            "[yellow]Recherche Google non configuree:[/yellow] "
            "seules les fiches avec un ID MyAnimeList seront synchronisees."
        )

    overrides = {"dry_run": dry_run}
    if batch_size is not None:
        overrides["batch_size"] = batch_size
    if pause is not None:
        overrides["batch_pause_seconds"] = pause
    service = container.sync_service(**overrides)

    mode = " [dim](simulation)[/dim]" if dry_run else ""
    console.print(f"[bold cyan]Synchronisation Notion <- MyAnimeList[/bold cyan]{mode}\n")

    with suppress_loguru():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
            transient=False,
        ) as progress:
            task = progress.add_task("[cyan]Synchronisation...", total=None)

            def on_progress(info: ProgressInfo) -> None:
                """Callback de progression."""
                progress.update(task, completed=info.current, total=info.total)
                if info.outcome in (SyncOutcome.UPDATED, SyncOutcome.DRY_RUN):
                    progress.console.print(f"  [green]✓[/green] {info.name}")
                elif info.outcome == SyncOutcome.UNRESOLVED:
                    progress.console.print(f"  [yellow]?[/yellow] {info.name} - ID introuvable")
                elif info.outcome == SyncOutcome.NO_DATA:
                    progress.console.print(f"  [dim]-[/dim] {info.name} - aucune donnee MAL")
                else:
                    progress.console.print(f"  [red]✗[/red] {info.name} - echec")

            stats = await service.sync_all(on_progress=on_progress)

    # Afficher le resume
    console.print("\n[bold]Resume:[/bold]")
    if dry_run:
        console.print(f"  [green]{stats.dry_run}[/green] mise(s) a jour calculee(s)")
    else:
        console.print(f"  [green]{stats.updated}[/green] mise(s) a jour")
    if stats.unresolved > 0:
        console.print(f"  [yellow]{stats.unresolved}[/yellow] sans identifiant")
    if stats.no_data > 0:
        console.print(f"  [yellow]{stats.no_data}[/yellow] sans donnee MAL")
    if stats.failed > 0:
        console.print(f"  [red]{stats.failed}[/red] echec(s)")
    console.print(f"  [dim]{stats.excluded} fiche(s) exclue(s) (Skip/Cleaned)[/dim]")
    console.print(f"  [dim]{stats.search_calls} appel(s) a la recherche Google[/dim]")


def chain(
    mal_id: Annotated[int, typer.Argument(help="Identifiant MyAnimeList de la racine")],
    kind: Annotated[
        MediaKind,
        typer.Option("--kind", "-k", help="Type de media", case_sensitive=False),
    ] = MediaKind.SERIES,
    shallow: Annotated[
        bool,
        typer.Option("--shallow", help="Liste les suites directes sans parcourir la chaine"),
    ] = False,
) -> None:
    """Affiche les statistiques agregees d'une chaine de suites."""
    asyncio.run(_chain_async(mal_id, kind, shallow))


@with_container()
async def _chain_async(container, mal_id: int, kind: MediaKind, shallow: bool) -> None:
    """Implementation async de la commande chain."""
    from malsync.services.sync import build_catalog_update

    aggregator = container.aggregator()
    summary = await aggregator.aggregate(mal_id, kind, skip_sequel_traverse=shallow)

    if summary is None:
        console.print(f"[red]Aucune donnee MAL pour {kind.path} {mal_id}[/red]")
        raise typer.Exit(code=1)

    update = build_catalog_update(mal_id, summary)

    table = Table(title=f"{kind.value} {mal_id}", show_header=False)
    table.add_column("Champ", style="cyan")
    table.add_column("Valeur")
    table.add_row("Total", str(update.total))
    table.add_row("Duree (min)", str(update.duration))
    table.add_row("Duree totale (min)", str(summary.total_duration))
    table.add_row("Statut", update.airing_status.value if update.airing_status else "-")
    table.add_row(
        "Note (0-5)",
        f"{update.web_rating:.2f}" if update.web_rating is not None else "-",
    )
    table.add_row("Genres", ", ".join(update.genres) or "-")
    table.add_row("Suites", str(summary.sequel_count))
    table.add_row("Titres des suites", update.sequel_titles or "-")
    table.add_row("Appels MAL", str(aggregator.fetch_count))
    console.print(table)
