"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : lisible par l'humain, colorée, pour suivre la synchronisation
- Sortie fichier : sérialisée en JSON, avec rotation, pour l'analyse historique

Les messages de relance (rate limit Jikan/Google) sont marqués par
``logger.bind(retry=True)``. Sur la console, ils ont leur propre seuil
(``retry_log_level``) pour ne pas noyer la progression lors d'une longue
synchronisation; le fichier les conserve tous.
"""

import sys
from pathlib import Path
from typing import Any, Callable

from loguru import logger

RETRY_EXTRA_KEY = "retry"


def make_console_filter(log_level: str, retry_log_level: str) -> Callable[[dict[str, Any]], bool]:
    """Construit le filtre console: seuil distinct pour les messages de relance.

    Args :
        log_level : Niveau minimum des messages ordinaires
        retry_log_level : Niveau minimum des messages marqués retry=True

    Returns :
        Filtre utilisable par logger.add(filter=...)
    """
    level_no = logger.level(log_level.upper()).no
    retry_level_no = logger.level(retry_log_level.upper()).no

    def console_filter(record: dict[str, Any]) -> bool:
        if record["extra"].get(RETRY_EXTRA_KEY):
            return record["level"].no >= retry_level_no
        return record["level"].no >= level_no

    return console_filter


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/malsync.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    retry_log_level: str = "WARNING",
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB", "1 GB")
        retention_count : Nombre de fichiers rotatifs à conserver
        retry_log_level : Niveau minimum des messages de relance sur la console
    """
    logger.remove()

    # Le filtre porte les seuils, le handler laisse tout passer
    logger.add(
        sys.stderr,
        level=0,
        filter=make_console_filter(log_level, retry_log_level),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug(
        "Logging configuré",
        log_file=str(log_file),
        rotation=rotation_size,
        retry_log_level=retry_log_level,
    )
