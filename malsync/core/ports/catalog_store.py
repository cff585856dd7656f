"""
Interface port pour le catalogue utilisateur.

Le stockage du catalogue est externe (base Notion) : le domaine ne connait
que la lecture des fiches et l'écriture d'un CatalogUpdate.
"""

from abc import ABC, abstractmethod

from malsync.core.entities.catalog import CatalogRecord, CatalogUpdate


class ICatalogStore(ABC):
    """Interface de lecture/écriture du catalogue."""

    @abstractmethod
    async def list_records(self) -> list[CatalogRecord]:
        """
        Liste toutes les fiches du catalogue.

        Retourne :
            Toutes les fiches, y compris celles marquées skip
        """
        ...

    @abstractmethod
    async def write_record(self, key: str, update: CatalogUpdate) -> bool:
        """
        Écrit les champs synchronisés sur une fiche.

        Args :
            key : Clé de la fiche (ID de page)
            update : Champs à écrire

        Retourne :
            True si l'écriture a réussi, False sinon

        Lève :
            RateLimitError : Si le stockage signale un rate limiting
        """
        ...
