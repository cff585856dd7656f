"""Sous-package CLI - re-exporte les commandes publiques."""

from malsync.adapters.cli.commands import chain, sync

__all__ = ["chain", "sync"]
