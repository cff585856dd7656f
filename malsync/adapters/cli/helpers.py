"""
Utilitaires partages pour les commandes CLI de malsync.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container et fermant les clients HTTP
"""

from contextlib import contextmanager
from functools import wraps

from loguru import logger as loguru_logger
from rich.console import Console

from malsync.container import Container

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("malsync")
    try:
        yield
    finally:
        loguru_logger.enable("malsync")


def with_container():
    """
    Decorateur qui injecte un container en premier argument.

    Les clients HTTP et le cache sont fermes a la fin de la commande.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.media_client().close()
                await container.search_client().close()
                await container.catalog_store().close()
                container.api_cache().close()
        return wrapper
    return decorator
