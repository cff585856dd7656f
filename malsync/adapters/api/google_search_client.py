"""
Client Google Custom Search pour retrouver les URLs MyAnimeList.

Implemente ISearchClient via l'API JSON Custom Search
(GET https://www.googleapis.com/customsearch/v1?key=...&cx=...&q=...).

Les resultats sont caches 24h: le quota journalier gratuit est faible.
"""

from typing import Optional

import httpx
from loguru import logger

from malsync.adapters.api.cache import APICache
from malsync.adapters.api.retry import check_rate_limit
from malsync.core.ports.api_clients import ISearchClient, SearchHit


class GoogleSearchClient(ISearchClient):
    """
    Client API Google Custom Search.

    Example:
        client = GoogleSearchClient(api_key="xxx", engine_id="yyy", cache=cache)
        hits = await client.search("Fullmetal Alchemist Anime MyAnimeList")
        await client.close()
    """

    SEARCH_URL = "https://www.googleapis.com/customsearch/v1"

    def __init__(
        self,
        api_key: Optional[str],
        engine_id: Optional[str],
        cache: APICache,
    ) -> None:
        """
        Initialise le client de recherche.

        Args:
            api_key: Cle API Google (optionnelle, recherche desactivee si absente)
            engine_id: Identifiant du moteur de recherche personnalise (cx)
            cache: Instance APICache pour le caching des resultats
        """
        self._api_key = api_key
        self._engine_id = engine_id
        self._cache = cache
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self._engine_id)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=30.0)
        return self._client

    async def search(self, query: str) -> list[SearchHit]:
        """
        Recherche des pages web.

        Args:
            query: Requete de recherche

        Returns:
            Liste ordonnee des resultats (vide si aucun resultat)

        Raises:
            RateLimitError: Sur 429/503
            httpx.HTTPStatusError: Pour les autres erreurs HTTP
        """
        cache_key = f"google:search:{query}"

        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        client = self._get_client()
        response = await client.get(
            self.SEARCH_URL,
            params={"key": self._api_key, "cx": self._engine_id, "q": query},
        )
        check_rate_limit(response)
        response.raise_for_status()
        data = response.json()

        # "items" est absent quand la recherche ne renvoie rien
        hits = [
            SearchHit(url=item["link"], title=item.get("title", ""))
            for item in data.get("items", [])
            if item.get("link")
        ]
        logger.debug(f"Recherche '{query}': {len(hits)} resultat(s)")

        await self._cache.set_search(cache_key, hits)
        return hits

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
