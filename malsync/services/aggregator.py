"""
Service d'agregation des chaines de suites MyAnimeList.

ChainAggregator part d'une fiche racine et parcourt ses suites (Sequel)
pour calculer les totaux cumules:
- nombre total d'episodes/volumes
- duree totale (episodes x duree par episode)
- note moyenne sur les entrees comptees
- statut de la derniere entree visitee
- titres des suites, separes par des virgules

Le parcours suit une seule branche: a chaque etape seule la premiere
suite comptee est poursuivie. Les films, OVA et specials sont traverses
sans etre comptes.
"""

import re
from typing import Optional

from loguru import logger

from malsync.adapters.api.retry import BackoffExecutor, BackoffExhaustedError
from malsync.core.entities.media import ChainSummary, MediaKind, MediaRecord, SequelRef
from malsync.core.ports.api_clients import IMediaDatabaseClient
from malsync.utils.constants import DEFAULT_DURATION_MINUTES, MAIN_FORMATS

HOURS_PATTERN = re.compile(r"(\d+)\s*hr", re.IGNORECASE)
MINUTES_PATTERN = re.compile(r"(\d+)\s*min", re.IGNORECASE)
SECONDS_PATTERN = re.compile(r"(\d+)\s*sec", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"^\s*(\d+)")


def parse_duration(duration: Optional[str]) -> int:
    """
    Convertit une duree MAL en minutes.

    Formats reconnus: "24 min per ep", "2 hr 5 min", "1 hr", "30 sec per ep",
    "24". Les secondes sont arrondies a la minute la plus proche (minimum 1).
    Retourne DEFAULT_DURATION_MINUTES (90) si la duree est absente
    ou illisible ("Unknown").

    Args:
        duration: Duree lisible fournie par MAL

    Returns:
        Duree en minutes
    """
    if not duration:
        return DEFAULT_DURATION_MINUTES

    hours = HOURS_PATTERN.search(duration)
    minutes = MINUTES_PATTERN.search(duration)
    seconds = SECONDS_PATTERN.search(duration)
    if hours or minutes or seconds:
        total_seconds = 0
        if hours:
            total_seconds += 3600 * int(hours.group(1))
        if minutes:
            total_seconds += 60 * int(minutes.group(1))
        if seconds:
            total_seconds += int(seconds.group(1))
        # arrondi a la minute la plus proche, jamais sous 1 minute
        return max(1, (total_seconds + 30) // 60)

    number = NUMBER_PATTERN.match(duration)
    if number:
        return int(number.group(1))
    return DEFAULT_DURATION_MINUTES


def join_titles(titles: list[str]) -> str:
    return ", ".join(titles)


class ChainAggregator:
    """
    Agregateur des statistiques d'une chaine de suites.

    Chaque recuperation de fiche passe par le BackoffExecutor. Un echec
    definitif sur la racine donne None (pas de mise a jour); sur une
    suite, il termine le parcours.

    Example:
        aggregator = ChainAggregator(media_client=jikan, executor=executor)
        summary = await aggregator.aggregate(5114, MediaKind.SERIES)
    """

    def __init__(self, media_client: IMediaDatabaseClient, executor: BackoffExecutor) -> None:
        self._media_client = media_client
        self._executor = executor
        self.fetch_count = 0

    async def _fetch(self, mal_id: int, kind: MediaKind) -> Optional[MediaRecord]:
        """Recupere une fiche avec backoff, None en cas d'echec definitif."""
        self.fetch_count += 1
        try:
            return await self._executor.execute(
                lambda: self._media_client.get_media(mal_id, kind)
            )
        except BackoffExhaustedError as e:
            logger.error(f"Impossible de recuperer {kind.path} {mal_id}: {e}")
            return None

    async def aggregate(
        self,
        mal_id: int,
        kind: MediaKind,
        skip_sequel_traverse: bool = False,
    ) -> Optional[ChainSummary]:
        """
        Agrege la fiche racine et sa chaine de suites.

        Args:
            mal_id: Identifiant MAL de la racine
            kind: Anime ou manga
            skip_sequel_traverse: Si True, liste seulement les suites directes
                                  sans les recuperer

        Returns:
            ChainSummary, ou None si la racine est indisponible
        """
        root = await self._fetch(mal_id, kind)
        if root is None:
            return None

        duration = parse_duration(root.duration)
        root_units = root.units or 0
        summary = ChainSummary(
            mal_id=mal_id,
            total_units=root_units,
            duration=duration,
            total_duration=duration * root_units,
            status=root.status,
            score=root.score,
            genres=root.genres,
        )

        if skip_sequel_traverse:
            summary.sequel_titles = join_titles([sequel.title for sequel in root.sequels])
            return summary

        await self._walk_chain(root, kind, summary)
        return summary

    async def _walk_chain(
        self, root: MediaRecord, kind: MediaKind, summary: ChainSummary
    ) -> None:
        """
        Parcourt la chaine de suites et cumule les statistiques dans summary.
        """
        visited = {root.mal_id}
        titles: list[str] = []
        score_sum = root.score or 0.0
        scored = root.score is not None

        frontier: list[Optional[SequelRef]] = list(root.sequels)
        while frontier:
            next_frontier: list[Optional[SequelRef]] = []
            for sequel in frontier:
                if not sequel:
                    next_frontier = []
                    break
                if sequel.mal_id in visited:
                    logger.warning(f"Cycle detecte sur {kind.path} {sequel.mal_id}, ignore")
                    continue
                visited.add(sequel.mal_id)

                node = await self._fetch(sequel.mal_id, kind)
                if node is None:
                    next_frontier = []
                    break
                next_frontier.extend(node.sequels)
                logger.debug(f"Suite: {node.title}")

                if node.media_format not in MAIN_FORMATS:
                    logger.debug(f"Format {node.media_format} ignore: {node.title}")
                    continue

                summary.sequel_count += 1
                titles.append(node.title)

                node_duration = parse_duration(node.duration)
                if node.units and node_duration:
                    summary.total_duration += node.units * node_duration
                    summary.total_units += node.units

                if node.score is not None:
                    score_sum += node.score
                    scored = True

                # Le statut de la derniere suite visitee l'emporte
                summary.status = node.status
                break

            frontier = next_frontier

        summary.sequel_titles = join_titles(titles)
        if summary.sequel_count > 0 and scored:
            summary.score = score_sum / (summary.sequel_count + 1)
