"""
Couche infrastructure : implementations concretes des ports.

- api/ : Clients Jikan et Google Custom Search, cache, backoff
- notion/ : Catalogue Notion
- cli/ : Commandes Typer
"""
