"""
Couche domaine (core).

Contient les entités métier et les ports (interfaces abstraites).
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, HTTP).

Sous-packages :
- entities/ : Entités métier (MediaRecord, ChainSummary, CatalogRecord)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
"""
