"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports client API : Contrats pour les services externes
- ISearchClient : Recherche web (résolution des identifiants)
- IMediaDatabaseClient : Base de données média (MyAnimeList)
- SearchHit : Résultat de recherche

Port catalogue : Contrat de lecture/écriture du catalogue
- ICatalogStore : Catalogue utilisateur (Notion)
"""

from malsync.core.ports.api_clients import (
    IMediaDatabaseClient,
    ISearchClient,
    SearchHit,
)
from malsync.core.ports.catalog_store import ICatalogStore

__all__ = [
    # Clients API
    "IMediaDatabaseClient",
    "ISearchClient",
    "SearchHit",
    # Catalogue
    "ICatalogStore",
]
