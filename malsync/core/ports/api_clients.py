"""
Interfaces ports pour les clients API.

Interfaces abstraites (ports) définissant les contrats pour les services externes.
Les implémentations (adaptateurs) fournissent les clients concrets
(Google Custom Search pour la recherche, Jikan pour MyAnimeList).

Les clients signalent le rate limiting en levant RateLimitError ; les retries
sont pilotés par le BackoffExecutor au niveau des services.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from malsync.core.entities.media import MediaKind, MediaRecord


@dataclass(frozen=True)
class SearchHit:
    """
    Résultat classé d'une recherche web.

    Attributs :
        url : Lien du résultat
        title : Titre de la page (informatif)
    """

    url: str
    title: str = ""


class ISearchClient(ABC):
    """
    Interface pour le service de recherche externe.

    Utilisé pour retrouver l'URL MyAnimeList d'une fiche sans identifiant.
    """

    @abstractmethod
    async def search(self, query: str) -> list[SearchHit]:
        """
        Recherche des pages par requête texte.

        Args :
            query : Requête de recherche

        Retourne :
            Liste ordonnée des résultats (vide si aucun résultat)

        Lève :
            RateLimitError : Si le service signale un rate limiting
        """
        ...

    @property
    def enabled(self) -> bool:
        """Indique si le client est configuré (clés présentes)."""
        return True


class IMediaDatabaseClient(ABC):
    """
    Interface pour la base de données média (MyAnimeList).
    """

    @abstractmethod
    async def get_media(self, mal_id: int, kind: MediaKind) -> Optional[MediaRecord]:
        """
        Récupère une fiche anime ou manga.

        Args :
            mal_id : Identifiant MyAnimeList
            kind : Anime ou manga

        Retourne :
            La fiche, ou None si introuvable ou en erreur non transitoire

        Lève :
            RateLimitError : Si l'API signale un rate limiting (429/503)
        """
        ...
