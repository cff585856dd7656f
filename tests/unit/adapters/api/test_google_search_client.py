"""
Tests for GoogleSearchClient - Google Custom Search JSON API.
"""

from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from malsync.adapters.api.google_search_client import GoogleSearchClient
from malsync.adapters.api.retry import RateLimitError
from malsync.core.ports.api_clients import ISearchClient, SearchHit
from tests.fixtures.search_responses import (
    GOOGLE_SEARCH_EMPTY_RESPONSE,
    GOOGLE_SEARCH_RESPONSE,
)

SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


@pytest.fixture
def search_client(mock_cache: AsyncMock) -> GoogleSearchClient:
    return GoogleSearchClient(api_key="google_key", engine_id="engine_id", cache=mock_cache)


class TestGoogleSearchClientConfig:
    def test_implements_interface(self, search_client: GoogleSearchClient):
        assert isinstance(search_client, ISearchClient)

    def test_enabled_with_keys(self, search_client: GoogleSearchClient):
        assert search_client.enabled is True

    @pytest.mark.parametrize(
        "api_key,engine_id",
        [(None, "engine_id"), ("google_key", None), ("", "")],
    )
    def test_disabled_without_keys(self, mock_cache: AsyncMock, api_key, engine_id):
        client = GoogleSearchClient(api_key=api_key, engine_id=engine_id, cache=mock_cache)
        assert client.enabled is False


class TestGoogleSearch:
    @pytest.mark.asyncio
    @respx.mock
    async def test_search_returns_ordered_hits(self, search_client: GoogleSearchClient):
        respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=GOOGLE_SEARCH_RESPONSE)
        )

        hits = await search_client.search("Fullmetal Alchemist Anime MyAnimeList")

        assert [hit.url for hit in hits] == [
            "https://en.wikipedia.org/wiki/Fullmetal_Alchemist",
            "https://myanimelist.net/anime/5114/Fullmetal_Alchemist__Brotherhood",
            "https://myanimelist.net/anime/121/Fullmetal_Alchemist",
        ]
        assert all(isinstance(hit, SearchHit) for hit in hits)
        assert hits[1].title == "Fullmetal Alchemist: Brotherhood - MyAnimeList.net"

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_sends_key_engine_and_query(self, search_client: GoogleSearchClient):
        route = respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=GOOGLE_SEARCH_EMPTY_RESPONSE)
        )

        await search_client.search("Berserk Manga MyAnimeList")

        params = route.calls.last.request.url.params
        assert params["key"] == "google_key"
        assert params["cx"] == "engine_id"
        assert params["q"] == "Berserk Manga MyAnimeList"

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_items_gives_empty_list(self, search_client: GoogleSearchClient):
        respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=GOOGLE_SEARCH_EMPTY_RESPONSE)
        )

        assert await search_client.search("nothing") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_raises(self, search_client: GoogleSearchClient):
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(429))

        with pytest.raises(RateLimitError):
            await search_client.search("Berserk Manga MyAnimeList")

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_errors_propagate(self, search_client: GoogleSearchClient):
        respx.get(SEARCH_URL).mock(return_value=httpx.Response(403))

        with pytest.raises(httpx.HTTPStatusError):
            await search_client.search("Berserk Manga MyAnimeList")

    @pytest.mark.asyncio
    @respx.mock
    async def test_cache_hit_skips_api(
        self, search_client: GoogleSearchClient, mock_cache: AsyncMock
    ):
        cached = [SearchHit(url="https://myanimelist.net/manga/2/Berserk")]
        mock_cache.get.return_value = cached
        route = respx.get(SEARCH_URL)

        hits = await search_client.search("Berserk Manga MyAnimeList")

        assert hits is cached
        assert not route.called
        mock_cache.get.assert_called_once_with("google:search:Berserk Manga MyAnimeList")

    @pytest.mark.asyncio
    @respx.mock
    async def test_results_are_cached(
        self, search_client: GoogleSearchClient, mock_cache: AsyncMock
    ):
        respx.get(SEARCH_URL).mock(
            return_value=httpx.Response(200, json=GOOGLE_SEARCH_RESPONSE)
        )

        hits = await search_client.search("query")

        mock_cache.set_search.assert_called_once_with("google:search:query", hits)
