"""
Clients API externes pour la synchronisation des metadonnees.

Ce module fournit les adaptateurs pour communiquer avec les API externes:
- Jikan: API non officielle MyAnimeList (fiches anime/manga)
- Google Custom Search: resolution des URLs MyAnimeList

Infrastructure partagee:
- APICache: Cache persistant avec TTL (recherches et fiches 24h)
- RateLimitError: Exception pour les erreurs 429/503
- BackoffExecutor: Relances avec backoff exponentiel

Les clients implementent les ports definis dans core/ports/api_clients.py.
"""

from malsync.adapters.api.cache import APICache
from malsync.adapters.api.retry import (
    BackoffExecutor,
    BackoffExhaustedError,
    RateLimitError,
    check_rate_limit,
)

__all__ = [
    "APICache",
    "BackoffExecutor",
    "BackoffExhaustedError",
    "RateLimitError",
    "check_rate_limit",
]
