"""
Cache persistant pour les API externes avec TTL.

Le cache utilise diskcache pour la persistence sur disque, ce qui permet
de conserver les donnees entre deux executions de la synchronisation et
d'economiser le quota de recherche Google.

TTL par defaut:
- Recherches (SEARCH_TTL): 24 heures
- Fiches MAL (MEDIA_TTL): 24 heures - le statut de diffusion evolue souvent
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les appels API.

    Utilise diskcache pour la persistence et run_in_executor pour
    les operations asynchrones non-bloquantes.

    Example:
        cache = APICache(cache_dir=".cache/api")
        await cache.set_media("jikan:anime:5114", record)
        data = await cache.get("jikan:anime:5114")
    """

    SEARCH_TTL = 24 * 60 * 60  # 24 heures en secondes (86400)
    MEDIA_TTL = 24 * 60 * 60

    def __init__(self, cache_dir: str | Path = ".cache/api") -> None:
        """
        Initialise le cache avec un repertoire de stockage.

        Args:
            cache_dir: Chemin vers le repertoire du cache (cree si inexistant)
        """
        self._cache = Cache(str(cache_dir))

    async def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Stocke une valeur dans le cache avec un TTL.

        Args:
            key: Cle unique identifiant la donnee
            value: Valeur a stocker (doit etre picklable)
            ttl: Duree de vie en secondes
        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_search(self, key: str, value: Any) -> None:
        """Stocke un resultat de recherche (TTL de 24h)."""
        await self.set(key, value, self.SEARCH_TTL)

    async def set_media(self, key: str, value: Any) -> None:
        """Stocke une fiche MAL (TTL de 24h)."""
        await self.set(key, value, self.MEDIA_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
