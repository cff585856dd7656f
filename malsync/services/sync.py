"""
Service de synchronisation du catalogue avec MyAnimeList.

SyncService orchestre, pour chaque fiche du catalogue:
resolution de l'identifiant -> agregation de la chaine de suites ->
conversion en CatalogUpdate -> ecriture dans le catalogue.

Les fiches sont traitees par lots de taille fixe: les fiches d'un lot
sont lancees ensemble (asyncio.gather) et une pause fixe separe deux lots
pour menager les quotas des API. L'echec d'une fiche n'affecte jamais
les autres fiches du lot.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional

from loguru import logger

from malsync.adapters.api.retry import BackoffExecutor
from malsync.core.entities.catalog import CatalogRecord, CatalogUpdate
from malsync.core.entities.media import ChainSummary
from malsync.core.ports.catalog_store import ICatalogStore
from malsync.services.aggregator import ChainAggregator
from malsync.services.resolver import LookupResolver


class SyncOutcome(str, Enum):
    """Resultat de synchronisation d'une fiche."""

    UPDATED = "updated"
    UNRESOLVED = "unresolved"
    NO_DATA = "no_data"
    FAILED = "failed"
    DRY_RUN = "dry_run"


@dataclass(frozen=True)
class RecordResult:
    """
    Resultat de synchronisation d'une fiche.

    Attributes:
        outcome: Issue de la synchronisation
        mal_id: Identifiant MAL resolu (None si non resolu)
    """

    outcome: SyncOutcome
    mal_id: Optional[int] = None


@dataclass
class ProgressInfo:
    """Information de progression pour le callback."""

    current: int
    total: int
    name: str
    outcome: SyncOutcome
    mal_id: Optional[int] = None


@dataclass
class SyncStats:
    """Statistiques d'une synchronisation complete."""

    total: int = 0
    updated: int = 0
    unresolved: int = 0
    no_data: int = 0
    failed: int = 0
    dry_run: int = 0
    excluded: int = 0
    search_calls: int = 0

    def record(self, outcome: SyncOutcome) -> None:
        """Incremente le compteur correspondant au resultat."""
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)


def chunked(records: list[CatalogRecord], size: int) -> Iterator[list[CatalogRecord]]:
    """Decoupe une liste en lots de taille fixe."""
    for start in range(0, len(records), size):
        yield records[start:start + size]


def build_catalog_update(mal_id: int, summary: ChainSummary) -> CatalogUpdate:
    """
    Convertit un ChainSummary en champs du catalogue.

    La note MAL (0-10) est ramenee sur l'echelle 0-5 du catalogue.
    """
    return CatalogUpdate(
        mal_id=mal_id,
        total=summary.total_units,
        duration=summary.duration,
        airing_status=summary.status,
        web_rating=summary.score / 2 if summary.score is not None else None,
        genres=summary.genres,
        sequel_titles=summary.sequel_titles,
        skip=False,
    )


class SyncService:
    """
    Orchestrateur de la synchronisation du catalogue.

    Attributes:
        BATCH_SIZE: Nombre de fiches lancees ensemble
        BATCH_PAUSE_SECONDS: Pause entre deux lots

    Example:
        service = SyncService(store, resolver, aggregator, executor)
        stats = await service.sync_all()
        print(f"Mises a jour: {stats.updated}, echecs: {stats.failed}")
    """

    BATCH_SIZE: int = 15
    BATCH_PAUSE_SECONDS: float = 15.0

    def __init__(
        self,
        store: ICatalogStore,
        resolver: LookupResolver,
        aggregator: ChainAggregator,
        executor: BackoffExecutor,
        batch_size: int = BATCH_SIZE,
        batch_pause_seconds: float = BATCH_PAUSE_SECONDS,
        dry_run: bool = False,
    ) -> None:
        """
        Initialise le service de synchronisation.

        Args:
            store: Catalogue a synchroniser
            resolver: Resolution des identifiants MAL
            aggregator: Agregation des chaines de suites
            executor: Backoff pour la lecture et l'ecriture du catalogue
            batch_size: Taille des lots
            batch_pause_seconds: Pause entre deux lots
            dry_run: Si True, calcule les mises a jour sans les ecrire
        """
        self._store = store
        self._resolver = resolver
        self._aggregator = aggregator
        self._executor = executor
        self._batch_size = max(1, batch_size)
        self._batch_pause_seconds = batch_pause_seconds
        self._dry_run = dry_run

    async def sync_record(self, record: CatalogRecord) -> RecordResult:
        """
        Synchronise une seule fiche.

        Les exceptions sont tracees et converties en FAILED pour ne pas
        interrompre le lot.

        Args:
            record: Fiche a synchroniser

        Returns:
            Le resultat et l'identifiant MAL resolu
        """
        mal_id = record.mal_id
        try:
            resolution = await self._resolver.resolve(record)
            if resolution is None:
                logger.warning(f"Identifiant introuvable pour '{record.name}', fiche ignoree")
                return RecordResult(SyncOutcome.UNRESOLVED)
            mal_id = resolution.mal_id

            summary = await self._aggregator.aggregate(
                resolution.mal_id,
                record.kind,
                skip_sequel_traverse=record.skip_sequel_traverse,
            )
            if summary is None:
                logger.warning(
                    f"Aucune donnee MAL pour '{record.name}' (ID {resolution.mal_id})"
                )
                return RecordResult(SyncOutcome.NO_DATA, mal_id)

            update = build_catalog_update(resolution.mal_id, summary)
            logger.info(
                "Resultats pour {name}",
                name=record.name,
                page=record.key,
                kind=record.kind.value,
                url=resolution.source_url,
                mal_id=resolution.mal_id,
                total=update.total,
                sequels=summary.sequel_count,
            )

            if self._dry_run:
                return RecordResult(SyncOutcome.DRY_RUN, mal_id)

            written = await self._executor.execute(
                lambda: self._store.write_record(record.key, update)
            )
            outcome = SyncOutcome.UPDATED if written else SyncOutcome.FAILED
            return RecordResult(outcome, mal_id)
        except Exception as e:
            logger.exception(f"Echec de synchronisation pour '{record.name}': {e}")
            return RecordResult(SyncOutcome.FAILED, mal_id)

    async def sync_all(
        self,
        on_progress: Optional[Callable[[ProgressInfo], None]] = None,
    ) -> SyncStats:
        """
        Synchronise toutes les fiches en attente, lot par lot.

        Args:
            on_progress: Callback de progression optionnel

        Returns:
            Statistiques de synchronisation
        """
        stats = SyncStats()
        records = await self._executor.execute(self._store.list_records)
        pending = [r for r in records if not r.skip and not r.cleaned]
        stats.total = len(pending)
        stats.excluded = len(records) - len(pending)

        current = 0
        for index, batch in enumerate(chunked(pending, self._batch_size)):
            if index > 0 and self._batch_pause_seconds > 0:
                logger.info(
                    f"Attente de {self._batch_pause_seconds:g}s avant le lot suivant..."
                )
                await asyncio.sleep(self._batch_pause_seconds)

            results = await asyncio.gather(*(self.sync_record(r) for r in batch))
            for record, result in zip(batch, results):
                current += 1
                stats.record(result.outcome)
                if on_progress:
                    on_progress(
                        ProgressInfo(
                            current=current,
                            total=stats.total,
                            name=record.name,
                            outcome=result.outcome,
                            mal_id=result.mal_id,
                        )
                    )
            logger.info(f"Lot termine: {len(batch)} fiche(s)")

        stats.search_calls = self._resolver.search_calls
        return stats
