"""
Point d'entrée CLI de malsync.

Configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from .adapters.cli.commands import chain, sync
from .config import Settings
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="malsync",
    help="Synchronisation d'un catalogue Notion avec MyAnimeList",
)

app.command()(sync)
app.command()(chain)


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = Settings()
    logger.info("Configuration malsync")
    typer.echo(f"Notion : {'configuré' if config.notion_enabled else 'non configuré'}")
    typer.echo(f"Recherche Google : {'activée' if config.search_enabled else 'désactivée'}")
    typer.echo(f"Jikan : {config.jikan_base_url}")
    typer.echo(
        f"Backoff : {config.backoff_max_retries} relances, "
        f"base {config.backoff_base_delay}s, max {config.backoff_max_delay}s"
    )
    typer.echo(f"Lots : {config.batch_size} fiches, pause {config.batch_pause_seconds}s")
    typer.echo(f"Cache : {config.cache_dir}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"malsync v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = Settings()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
        retry_log_level=settings.log_retry_level,
    )

    logger.info("Démarrage de malsync", version=__version__)

    app()


if __name__ == "__main__":
    main()
