"""
malsync - Synchronisation d'un catalogue Notion avec MyAnimeList.

Ce package resout les fiches du catalogue vers un identifiant MyAnimeList,
agrege les metadonnees de toute la chaine de suites (episodes, duree, note
moyenne, statut) et ecrit le resultat dans la base Notion.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports)
- services/ : Couche application (résolution, agrégation, synchronisation)
- adapters/ : Couche infrastructure (CLI, Notion, clients API)
"""
