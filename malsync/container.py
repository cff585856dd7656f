"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI:
configuration, cache, backoff, clients API, catalogue et services.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.google_search_client import GoogleSearchClient
from .adapters.api.jikan_client import JikanClient
from .adapters.api.retry import BackoffExecutor
from .adapters.notion.catalog_store import NotionCatalogStore
from .config import Settings
from .services.aggregator import ChainAggregator
from .services.resolver import LookupResolver
from .services.sync import SyncService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        service = container.sync_service(dry_run=True)
        stats = await service.sync_all()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Cache API - Singleton pour partage entre clients
    api_cache = providers.Singleton(
        APICache,
        cache_dir=config.provided.cache_dir,
    )

    # Backoff unique pour tous les appels reseau
    backoff_executor = providers.Singleton(
        BackoffExecutor,
        max_retries=config.provided.backoff_max_retries,
        base_delay=config.provided.backoff_base_delay,
        max_delay=config.provided.backoff_max_delay,
    )

    # Clients API - Singleton avec cles depuis config
    # Si les cles Google sont absentes, le client est cree mais desactive
    # (LookupResolver verifie search_client.enabled avant utilisation)
    search_client = providers.Singleton(
        GoogleSearchClient,
        api_key=config.provided.google_api_key,
        engine_id=config.provided.google_search_engine_id,
        cache=api_cache,
    )

    media_client = providers.Singleton(
        JikanClient,
        cache=api_cache,
        base_url=config.provided.jikan_base_url,
    )

    catalog_store = providers.Singleton(
        NotionCatalogStore,
        api_key=config.provided.notion_api_key,
        database_id=config.provided.notion_database_id,
        notion_version=config.provided.notion_version,
    )

    # Services - Factory pour un compteur de recherche par execution
    resolver = providers.Factory(
        LookupResolver,
        search_client=search_client,
        executor=backoff_executor,
    )

    aggregator = providers.Factory(
        ChainAggregator,
        media_client=media_client,
        executor=backoff_executor,
    )

    # Utiliser: container.sync_service(dry_run=True/False)
    sync_service = providers.Factory(
        SyncService,
        store=catalog_store,
        resolver=resolver,
        aggregator=aggregator,
        executor=backoff_executor,
        batch_size=config.provided.batch_size,
        batch_pause_seconds=config.provided.batch_pause_seconds,
    )
