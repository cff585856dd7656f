"""
Tests unitaires pour la configuration, le logging et le container DI.
"""

from pathlib import Path

import pytest
from dependency_injector import providers
from loguru import logger
from pydantic import ValidationError

from malsync.adapters.api.google_search_client import GoogleSearchClient
from malsync.config import Settings
from malsync.container import Container
from malsync.logging_config import configure_logging, make_console_filter
from malsync.services.sync import SyncService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isole les tests des variables MALSYNC_ de l'environnement."""
    for name in (
        "MALSYNC_NOTION_API_KEY",
        "MALSYNC_NOTION_DATABASE_ID",
        "MALSYNC_GOOGLE_API_KEY",
        "MALSYNC_GOOGLE_SEARCH_ENGINE_ID",
        "MALSYNC_BATCH_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.backoff_max_retries == 16
        assert settings.batch_size == 15
        assert settings.batch_pause_seconds == 15.0
        assert settings.notion_version == "2022-06-28"
        assert settings.jikan_base_url == "https://api.jikan.moe/v4"
        assert settings.notion_enabled is False
        assert settings.search_enabled is False
        assert settings.log_retry_level == "WARNING"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MALSYNC_BATCH_SIZE", "10")
        monkeypatch.setenv("MALSYNC_NOTION_API_KEY", "secret")
        monkeypatch.setenv("MALSYNC_NOTION_DATABASE_ID", "db")

        settings = Settings(_env_file=None)

        assert settings.batch_size == 10
        assert settings.notion_enabled is True

    def test_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, batch_size=0)

    def test_paths_expand_home(self) -> None:
        settings = Settings(_env_file=None, cache_dir="~/malsync-cache")

        assert settings.cache_dir == Path("~/malsync-cache").expanduser()

    def test_search_enabled_needs_both_keys(self) -> None:
        assert not Settings(_env_file=None, google_api_key="k").search_enabled
        assert Settings(
            _env_file=None, google_api_key="k", google_search_engine_id="cx"
        ).search_enabled


class TestLogging:
    def test_creates_log_directory(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "malsync.log"
        try:
            configure_logging(log_level="DEBUG", log_file=log_file)
            assert log_file.parent.is_dir()
        finally:
            logger.remove()

    @pytest.mark.parametrize(
        "level,retry,passes",
        [
            ("INFO", False, True),
            ("DEBUG", False, False),
            ("WARNING", True, True),
            ("INFO", True, False),
            ("DEBUG", True, False),
        ],
    )
    def test_console_filter_thresholds(self, level: str, retry: bool, passes: bool) -> None:
        console_filter = make_console_filter("INFO", "WARNING")
        record = {"level": logger.level(level), "extra": {"retry": True} if retry else {}}

        assert console_filter(record) is passes

    def test_retry_level_can_be_more_verbose(self) -> None:
        console_filter = make_console_filter("WARNING", "DEBUG")

        assert console_filter({"level": logger.level("DEBUG"), "extra": {"retry": True}})
        assert not console_filter({"level": logger.level("INFO"), "extra": {}})


class TestContainer:
    @pytest.fixture
    def container(self, test_settings: Settings):
        container = Container()
        container.config.override(providers.Object(test_settings))
        yield container
        container.api_cache().close()

    def test_sync_service_uses_configured_batches(self, container: Container) -> None:
        service = container.sync_service()

        assert isinstance(service, SyncService)
        assert service._batch_size == 15
        assert service._batch_pause_seconds == 0
        assert service._dry_run is False

    def test_sync_service_overrides(self, container: Container) -> None:
        service = container.sync_service(dry_run=True, batch_size=3)

        assert service._dry_run is True
        assert service._batch_size == 3

    def test_executor_is_shared(self, container: Container) -> None:
        executor = container.backoff_executor()

        assert executor.max_retries == 2
        assert container.resolver()._executor is executor
        assert container.aggregator()._executor is executor

    def test_search_client_built_from_settings(self, container: Container) -> None:
        client = container.search_client()

        assert isinstance(client, GoogleSearchClient)
        assert client.enabled is True

    def test_resolver_counter_is_per_instance(self, container: Container) -> None:
        assert container.resolver() is not container.resolver()
