"""
Service de resolution des identifiants MyAnimeList.

Une fiche du catalogue qui porte deja un identifiant MAL est resolue sans
recherche. Sinon une recherche web "{nom} {type} MyAnimeList" est lancee
(avec backoff) et le premier resultat pointant vers une fiche MAL du bon
type fournit l'identifiant.
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from loguru import logger

from malsync.adapters.api.retry import BackoffExecutor
from malsync.core.entities.catalog import CatalogRecord
from malsync.core.entities.media import MediaKind
from malsync.core.ports.api_clients import ISearchClient, SearchHit
from malsync.utils.constants import MAL_DOMAIN, SEARCH_SKIPPED, SEARCH_SUFFIX

# Chemin d'une fiche MAL: /anime/5114/Fullmetal_Alchemist__Brotherhood
MAL_PATH_PATTERN = re.compile(r"^/(anime|manga)/(\d+)(?:/|$)")


@dataclass(frozen=True)
class Resolution:
    """
    Identifiant resolu pour une fiche.

    Attributes:
        mal_id: Identifiant MyAnimeList
        source_url: URL du resultat retenu, ou SEARCH_SKIPPED
    """

    mal_id: int
    source_url: str


def parse_mal_id(url: str, kind: Optional[MediaKind] = None) -> Optional[int]:
    """
    Extrait l'identifiant MAL d'une URL.

    L'URL doit appartenir au domaine myanimelist.net et son chemin doit
    commencer par /anime/{id} ou /manga/{id}. Si kind est fourni, le
    segment doit correspondre au type attendu.

    Args:
        url: URL a analyser
        kind: Type attendu (optionnel)

    Returns:
        L'identifiant, ou None si l'URL ne correspond pas
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host != MAL_DOMAIN and not host.endswith("." + MAL_DOMAIN):
        return None

    match = MAL_PATH_PATTERN.match(parsed.path)
    if not match:
        return None
    if kind is not None and match.group(1) != kind.path:
        return None
    return int(match.group(2))


def build_search_query(record: CatalogRecord) -> str:
    """Construit la requete de recherche d'une fiche."""
    return f"{record.name} {record.kind.value} {SEARCH_SUFFIX}"


class LookupResolver:
    """
    Resout une fiche du catalogue vers un identifiant MyAnimeList.

    Attributes:
        search_calls: Nombre d'appels au service de recherche effectues
                      par cette instance (suivi du quota)

    Example:
        resolver = LookupResolver(search_client=google, executor=executor)
        resolution = await resolver.resolve(record)
        if resolution:
            print(resolution.mal_id, resolution.source_url)
    """

    def __init__(self, search_client: ISearchClient, executor: BackoffExecutor) -> None:
        self._search_client = search_client
        self._executor = executor
        self.search_calls = 0

    async def _search(self, query: str) -> list[SearchHit]:
        self.search_calls += 1
        return await self._search_client.search(query)

    async def resolve(self, record: CatalogRecord) -> Optional[Resolution]:
        """
        Resout l'identifiant MAL d'une fiche.

        Args:
            record: Fiche du catalogue

        Returns:
            Resolution, ou None si aucun identifiant n'est disponible

        Raises:
            BackoffExhaustedError: Si la recherche echoue apres toutes les relances
        """
        if record.mal_id is not None:
            return Resolution(mal_id=record.mal_id, source_url=SEARCH_SKIPPED)

        if not record.name:
            logger.warning(f"Fiche {record.key} sans nom ni identifiant, ignoree")
            return None

        if not self._search_client.enabled:
            logger.warning(
                f"Recherche non configuree, impossible de resoudre '{record.name}'"
            )
            return None

        query = build_search_query(record)
        hits = await self._executor.execute(lambda: self._search(query))

        for hit in hits:
            mal_id = parse_mal_id(hit.url, record.kind)
            if mal_id is not None:
                logger.debug(f"'{record.name}' -> {hit.url}")
                return Resolution(mal_id=mal_id, source_url=hit.url)

        logger.warning(f"Aucun identifiant disponible pour '{record.name}'")
        return None
