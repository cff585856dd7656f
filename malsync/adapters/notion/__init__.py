"""Adaptateur Notion: implementation de ICatalogStore."""

from malsync.adapters.notion.catalog_store import NotionCatalogStore, pack_update

__all__ = ["NotionCatalogStore", "pack_update"]
