"""
Client Jikan pour la recuperation des fiches MyAnimeList.

Implemente IMediaDatabaseClient via l'API REST Jikan v4
(endpoint /{anime|manga}/{id}/full, qui inclut les relations).

Le client ne relance pas lui-meme: les 429/503 sont convertis en
RateLimitError et le BackoffExecutor de l'appelant gere les relances.
Les autres erreurs (404, 5xx, reseau, JSON invalide) sont tracees et
resolues en None.

Usage:
    cache = APICache()
    client = JikanClient(cache=cache)
    record = await client.get_media(5114, MediaKind.SERIES)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from malsync.adapters.api.cache import APICache
from malsync.adapters.api.retry import check_rate_limit
from malsync.core.entities.media import AiringStatus, MediaKind, MediaRecord, SequelRef
from malsync.core.ports.api_clients import IMediaDatabaseClient


class JikanClient(IMediaDatabaseClient):
    """
    Client API Jikan (MyAnimeList non officiel).

    Attributes:
        JIKAN_BASE_URL: URL de base de l'API Jikan v4
    """

    JIKAN_BASE_URL = "https://api.jikan.moe/v4"

    def __init__(self, cache: APICache, base_url: str = JIKAN_BASE_URL) -> None:
        """
        Initialise le client Jikan.

        Args:
            cache: Instance APICache pour le caching des fiches
            base_url: URL de base de l'API (surchargeable pour une instance locale)
        """
        self._cache = cache
        self._base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Accept": "application/json"},
                timeout=30.0,
            )
        return self._client

    async def get_media(self, mal_id: int, kind: MediaKind) -> Optional[MediaRecord]:
        """
        Recupere une fiche anime ou manga.

        Args:
            mal_id: Identifiant MyAnimeList
            kind: Anime ou manga

        Returns:
            MediaRecord, ou None si introuvable ou en erreur

        Raises:
            RateLimitError: Sur 429/503, pour relance par le BackoffExecutor
        """
        cache_key = f"jikan:{kind.path}:{mal_id}"

        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        client = self._get_client()
        try:
            response = await client.get(f"/{kind.path}/{mal_id}/full")
            check_rate_limit(response)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.warning(f"Fiche {kind.path} {mal_id} introuvable sur MAL")
            else:
                logger.error(
                    f"Erreur Jikan {e.response.status_code} pour {kind.path} {mal_id}"
                )
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Erreur lors de la recuperation de {kind.path} {mal_id}: {e!r}")
            return None

        data = payload.get("data") if isinstance(payload, dict) else None
        if not data:
            logger.warning(f"Reponse Jikan vide pour {kind.path} {mal_id}")
            return None

        try:
            record = _parse_media(data, kind)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Fiche {kind.path} {mal_id} illisible: {e!r}")
            return None
        await self._cache.set_media(cache_key, record)
        return record

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


def _names(items: Optional[list[dict[str, Any]]]) -> tuple[str, ...]:
    return tuple(item["name"] for item in items or [] if item.get("name"))


def _parse_sequels(data: dict[str, Any], kind: MediaKind) -> tuple[SequelRef, ...]:
    """
    Extrait les suites depuis les relations Jikan.

    Seules les entrees de la relation "Sequel" du meme type (anime/manga)
    sont retenues, dans l'ordre de l'API.
    """
    sequels = []
    for relation in data.get("relations") or []:
        if relation.get("relation") != "Sequel":
            continue
        for entry in relation.get("entry") or []:
            if not entry.get("mal_id"):
                continue
            if entry.get("type", kind.path) != kind.path:
                continue
            sequels.append(SequelRef(mal_id=int(entry["mal_id"]), title=entry.get("name", "")))
    return tuple(sequels)


def _parse_media(data: dict[str, Any], kind: MediaKind) -> MediaRecord:
    """Transforme la reponse Jikan en MediaRecord."""
    units = data.get("volumes") if kind is MediaKind.PRINT else data.get("episodes")
    return MediaRecord(
        mal_id=int(data["mal_id"]),
        title=data.get("title") or "",
        kind=kind,
        media_format=data.get("type"),
        genres=_names(data.get("genres")),
        demographics=_names(data.get("demographics")),
        units=units,
        # Les mangas n'ont pas de duree
        duration=data.get("duration") if kind is MediaKind.SERIES else None,
        status=AiringStatus.parse(data.get("status")),
        score=data.get("score"),
        sequels=_parse_sequels(data, kind),
    )
