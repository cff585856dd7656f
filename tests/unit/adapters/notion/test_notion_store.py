"""
Tests unitaires pour NotionCatalogStore.

Ces tests verifient:
- La pagination par curseur de la requete de base
- Le depaquetage des proprietes en CatalogRecord
- L'empaquetage d'un CatalogUpdate pour PATCH /pages/{id}
- La gestion des erreurs d'ecriture
"""

import json

import httpx
import pytest
import respx

from malsync.adapters.api.retry import RateLimitError
from malsync.adapters.notion.catalog_store import NotionCatalogStore, pack_update
from malsync.core.entities.catalog import CatalogUpdate
from malsync.core.entities.media import AiringStatus, MediaKind
from malsync.core.ports.catalog_store import ICatalogStore
from tests.fixtures.notion_responses import (
    NOTION_QUERY_PAGE_1,
    NOTION_QUERY_PAGE_2,
    notion_page,
)

QUERY_URL = "https://api.notion.com/v1/databases/db123/query"


@pytest.fixture
def store() -> NotionCatalogStore:
    return NotionCatalogStore(api_key="secret_test", database_id="db123")


class TestListRecords:
    """Tests pour NotionCatalogStore.list_records()."""

    def test_implements_interface(self, store: NotionCatalogStore) -> None:
        assert isinstance(store, ICatalogStore)

    @pytest.mark.asyncio
    @respx.mock
    async def test_follows_cursor_until_exhausted(self, store: NotionCatalogStore) -> None:
        route = respx.post(QUERY_URL).mock(
            side_effect=[
                httpx.Response(200, json=NOTION_QUERY_PAGE_1),
                httpx.Response(200, json=NOTION_QUERY_PAGE_2),
            ]
        )

        records = await store.list_records()

        assert [r.key for r in records] == ["page-1", "page-2", "page-3"]
        assert route.call_count == 2
        first_body = json.loads(route.calls[0].request.content)
        second_body = json.loads(route.calls[1].request.content)
        assert first_body == {}
        assert second_body == {"start_cursor": "cursor-2"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_notion_headers(self, store: NotionCatalogStore) -> None:
        route = respx.post(QUERY_URL).mock(
            return_value=httpx.Response(200, json=NOTION_QUERY_PAGE_2)
        )

        await store.list_records()

        headers = route.calls.last.request.headers
        assert headers["Authorization"] == "Bearer secret_test"
        assert headers["Notion-Version"] == "2022-06-28"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unpacks_properties(self, store: NotionCatalogStore) -> None:
        respx.post(QUERY_URL).mock(
            side_effect=[
                httpx.Response(200, json=NOTION_QUERY_PAGE_1),
                httpx.Response(200, json=NOTION_QUERY_PAGE_2),
            ]
        )

        fma, berserk, mob = await store.list_records()

        assert fma.name == "Fullmetal Alchemist"
        assert fma.mal_id == 5114
        assert fma.kind == MediaKind.SERIES
        assert fma.skip is False

        assert berserk.mal_id is None
        assert berserk.kind == MediaKind.PRINT
        assert berserk.skip_sequel_traverse is True

        assert mob.skip is True
        assert mob.sequel_titles == "Mob Psycho 100 II"

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_properties_use_defaults(self, store: NotionCatalogStore) -> None:
        respx.post(QUERY_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "results": [{"id": "bare", "properties": {}}, notion_page("untyped", media_type=None)],
                    "has_more": False,
                    "next_cursor": None,
                },
            )
        )

        bare, untyped = await store.list_records()

        assert bare.name == ""
        assert bare.mal_id is None
        assert bare.kind == MediaKind.SERIES
        assert bare.cleaned is False
        assert untyped.kind == MediaKind.SERIES

    @pytest.mark.asyncio
    @respx.mock
    async def test_has_more_without_cursor_stops(self, store: NotionCatalogStore) -> None:
        route = respx.post(QUERY_URL).mock(
            return_value=httpx.Response(
                200, json={"results": [], "has_more": True, "next_cursor": None}
            )
        )

        assert await store.list_records() == []
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_raises(self, store: NotionCatalogStore) -> None:
        respx.post(QUERY_URL).mock(return_value=httpx.Response(429))

        with pytest.raises(RateLimitError):
            await store.list_records()


class TestWriteRecord:
    """Tests pour NotionCatalogStore.write_record()."""

    @pytest.fixture
    def update(self) -> CatalogUpdate:
        return CatalogUpdate(
            mal_id=5114,
            total=64,
            duration=24,
            airing_status=AiringStatus.FINISHED_AIRING,
            web_rating=4.55,
            genres=("Action", "Drama"),
            sequel_titles="",
        )

    @pytest.mark.asyncio
    @respx.mock
    async def test_patches_page_properties(
        self, store: NotionCatalogStore, update: CatalogUpdate
    ) -> None:
        route = respx.patch("https://api.notion.com/v1/pages/page-1").mock(
            return_value=httpx.Response(200, json={"id": "page-1"})
        )

        assert await store.write_record("page-1", update) is True

        body = json.loads(route.calls.last.request.content)
        assert body == {"properties": pack_update(update)}

    @pytest.mark.asyncio
    @respx.mock
    async def test_rejected_update_returns_false(
        self, store: NotionCatalogStore, update: CatalogUpdate
    ) -> None:
        respx.patch("https://api.notion.com/v1/pages/page-1").mock(
            return_value=httpx.Response(400, json={"message": "validation_error"})
        )

        assert await store.write_record("page-1", update) is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_raises(
        self, store: NotionCatalogStore, update: CatalogUpdate
    ) -> None:
        respx.patch("https://api.notion.com/v1/pages/page-1").mock(
            return_value=httpx.Response(503)
        )

        with pytest.raises(RateLimitError):
            await store.write_record("page-1", update)


class TestPackUpdate:
    """Tests pour pack_update()."""

    def test_packs_all_fields(self) -> None:
        update = CatalogUpdate(
            mal_id=5114,
            total=64,
            duration=24,
            airing_status=AiringStatus.FINISHED_AIRING,
            web_rating=4.55,
            genres=("Action", "Drama"),
            sequel_titles="Sequel A, Sequel B",
        )

        properties = pack_update(update)

        assert properties["Total"] == {"number": 64}
        assert properties["Duration"] == {"number": 24}
        assert properties["Airing Status"] == {"select": {"name": "Finished Airing"}}
        assert properties["Web Rating"] == {"number": 4.55}
        assert properties["MyAnimeList ID"] == {"number": 5114}
        assert properties["Genre"] == {"multi_select": [{"name": "Action"}, {"name": "Drama"}]}
        assert properties["Sequel Titles"] == {
            "rich_text": [{"text": {"content": "Sequel A, Sequel B"}}]
        }
        assert properties["Skip"] == {"checkbox": False}

    def test_missing_status_clears_select(self) -> None:
        properties = pack_update(CatalogUpdate(mal_id=1))

        assert properties["Airing Status"] == {"select": None}
        assert properties["Web Rating"] == {"number": None}

    def test_long_sequel_titles_are_truncated(self) -> None:
        properties = pack_update(CatalogUpdate(mal_id=1, sequel_titles="x" * 2500))

        content = properties["Sequel Titles"]["rich_text"][0]["text"]["content"]
        assert len(content) == 2000
