"""
Catalogue Notion: lecture des fiches et ecriture des champs synchronises.

Implemente ICatalogStore via l'API REST Notion:
- POST /v1/databases/{id}/query (pagination par curseur)
- PATCH /v1/pages/{id}

Les proprietes Notion sont depaquetees en CatalogRecord a la lecture et
un CatalogUpdate est empaquete en proprietes Notion a l'ecriture.
"""

from typing import Any, Callable, Optional

import httpx
from loguru import logger

from malsync.adapters.api.retry import check_rate_limit
from malsync.core.entities.catalog import CatalogRecord, CatalogUpdate
from malsync.core.entities.media import MediaKind
from malsync.core.ports.catalog_store import ICatalogStore
from malsync.utils.constants import (
    NOTION_TEXT_LIMIT,
    PROP_AIRING_STATUS,
    PROP_CLEANED,
    PROP_DURATION,
    PROP_GENRE,
    PROP_MAL_ID,
    PROP_NAME,
    PROP_SEQUEL_TITLES,
    PROP_SKIP,
    PROP_SKIP_SEQUEL,
    PROP_TOTAL,
    PROP_TYPE,
    PROP_WEB_RATING,
)


class NotionCatalogStore(ICatalogStore):
    """
    Catalogue stocke dans une base de donnees Notion.

    Example:
        store = NotionCatalogStore(api_key="secret_xxx", database_id="abc123")
        records = await store.list_records()
        await store.write_record(records[0].key, update)
        await store.close()
    """

    NOTION_BASE_URL = "https://api.notion.com/v1"
    NOTION_VERSION = "2022-06-28"

    def __init__(
        self,
        api_key: Optional[str],
        database_id: Optional[str],
        notion_version: str = NOTION_VERSION,
    ) -> None:
        """
        Initialise le catalogue Notion.

        Args:
            api_key: Jeton d'integration Notion
            database_id: Identifiant de la base a synchroniser
            notion_version: Version de l'API Notion (header Notion-Version)
        """
        self._api_key = api_key
        self._database_id = database_id
        self._notion_version = notion_version
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.NOTION_BASE_URL,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Notion-Version": self._notion_version,
                    "Content-Type": "application/json",
                },
                timeout=30.0,
            )
        return self._client

    async def list_records(self) -> list[CatalogRecord]:
        """
        Lit toutes les pages de la base, page de resultats par page.

        Raises:
            RateLimitError: Sur 429/503
            httpx.HTTPStatusError: Pour les autres erreurs HTTP
        """
        client = self._get_client()
        pages: list[dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            body: dict[str, Any] = {}
            if cursor:
                body["start_cursor"] = cursor
            response = await client.post(
                f"/databases/{self._database_id}/query", json=body
            )
            check_rate_limit(response)
            response.raise_for_status()
            data = response.json()

            pages.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break

        logger.info(f"{len(pages)} fiche(s) recuperee(s) depuis Notion")
        return [_unpack_page(page) for page in pages]

    async def write_record(self, key: str, update: CatalogUpdate) -> bool:
        """
        Met a jour les proprietes d'une page.

        Returns:
            True si Notion a accepte la mise a jour, False sinon

        Raises:
            RateLimitError: Sur 429/503
        """
        client = self._get_client()
        try:
            response = await client.patch(
                f"/pages/{key}", json={"properties": pack_update(update)}
            )
            check_rate_limit(response)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Echec de mise a jour de la page {key}: "
                f"{e.response.status_code} {e.response.text}"
            )
            return False
        return True

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


# Depaquetage des proprietes Notion


def _unpack(page: dict[str, Any], name: str, getter: Callable[[dict[str, Any]], Any]) -> Any:
    prop = page.get("properties", {}).get(name)
    if not prop:
        return None
    return getter(prop)


def _title(prop: dict[str, Any]) -> Optional[str]:
    title = prop.get("title") or []
    return title[0].get("plain_text") if title else None


def _rich_text(prop: dict[str, Any]) -> Optional[str]:
    rich_text = prop.get("rich_text") or []
    if not rich_text:
        return None
    return rich_text[0].get("plain_text") or rich_text[0].get("text", {}).get("content")


def _checkbox(prop: dict[str, Any]) -> bool:
    return bool(prop.get("checkbox"))


def _select(prop: dict[str, Any]) -> Optional[str]:
    select = prop.get("select")
    return select.get("name") if select else None


def _number(prop: dict[str, Any]) -> Optional[float]:
    return prop.get("number")


def _unpack_page(page: dict[str, Any]) -> CatalogRecord:
    """Transforme une page Notion en CatalogRecord."""
    mal_id = _unpack(page, PROP_MAL_ID, _number)
    return CatalogRecord(
        key=page["id"],
        mal_id=int(mal_id) if mal_id is not None else None,
        kind=MediaKind.from_label(_unpack(page, PROP_TYPE, _select)),
        name=_unpack(page, PROP_NAME, _title) or "",
        sequel_titles=_unpack(page, PROP_SEQUEL_TITLES, _rich_text),
        skip=bool(_unpack(page, PROP_SKIP, _checkbox)),
        cleaned=bool(_unpack(page, PROP_CLEANED, _checkbox)),
        skip_sequel_traverse=bool(_unpack(page, PROP_SKIP_SEQUEL, _checkbox)),
    )


def pack_update(update: CatalogUpdate) -> dict[str, Any]:
    """
    Empaquete un CatalogUpdate au format des proprietes Notion.

    Args:
        update: Champs a ecrire

    Returns:
        Dictionnaire "properties" pour PATCH /pages/{id}
    """
    status = {"name": update.airing_status.value} if update.airing_status else None
    return {
        PROP_TOTAL: {"number": update.total},
        PROP_DURATION: {"number": update.duration},
        PROP_AIRING_STATUS: {"select": status},
        PROP_WEB_RATING: {"number": update.web_rating},
        PROP_MAL_ID: {"number": update.mal_id},
        PROP_GENRE: {"multi_select": [{"name": genre} for genre in update.genres]},
        PROP_SEQUEL_TITLES: {
            "rich_text": [
                {"text": {"content": update.sequel_titles[:NOTION_TEXT_LIMIT]}}
            ]
        },
        PROP_SKIP: {"checkbox": update.skip},
    }
