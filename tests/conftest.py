"""
Fixtures pytest partagees pour les tests malsync.

Ce module contient les fixtures communes utilisees dans les tests:
- Executeur de backoff sans attente
- Mocks des ports (ISearchClient, IMediaDatabaseClient, ICatalogStore)
- Settings de test avec chemins temporaires
"""

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock

import pytest

from malsync.adapters.api.cache import APICache
from malsync.adapters.api.retry import BackoffExecutor
from malsync.config import Settings
from malsync.core.entities.media import MediaRecord
from malsync.core.ports.api_clients import IMediaDatabaseClient, ISearchClient
from malsync.core.ports.catalog_store import ICatalogStore


@pytest.fixture
def fast_executor() -> BackoffExecutor:
    """BackoffExecutor sans delai entre les tentatives."""
    return BackoffExecutor(max_retries=3, base_delay=0)


@pytest.fixture
def mock_cache() -> AsyncMock:
    """Mock APICache (cache miss par defaut)."""
    cache = AsyncMock(spec=APICache)
    cache.get.return_value = None
    return cache


@pytest.fixture
def mock_search_client() -> AsyncMock:
    """Mock de ISearchClient, active et sans resultat par defaut."""
    client = AsyncMock(spec=ISearchClient)
    client.enabled = True
    client.search.return_value = []
    return client


@pytest.fixture
def mock_catalog_store() -> AsyncMock:
    """Mock de ICatalogStore: catalogue vide, ecritures reussies."""
    store = AsyncMock(spec=ICatalogStore)
    store.list_records.return_value = []
    store.write_record.return_value = True
    return store


@pytest.fixture
def media_client_for() -> Callable[[dict[int, MediaRecord]], AsyncMock]:
    """
    Fabrique un mock de IMediaDatabaseClient servant des fiches par ID.

    Les IDs absents du dictionnaire renvoient None.
    """

    def factory(records: dict[int, MediaRecord]) -> AsyncMock:
        client = AsyncMock(spec=IMediaDatabaseClient)
        client.get_media.side_effect = lambda mal_id, kind: records.get(mal_id)
        return client

    return factory


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings de test avec chemins temporaires et sans pause."""
    return Settings(
        notion_api_key="secret_test",
        notion_database_id="db123",
        google_api_key="google_key",
        google_search_engine_id="engine_id",
        backoff_max_retries=2,
        backoff_base_delay=0,
        batch_size=15,
        batch_pause_seconds=0,
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
    )
