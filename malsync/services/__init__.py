"""
Couche application : résolution, agrégation et synchronisation.

- LookupResolver : fiche du catalogue -> identifiant MyAnimeList
- ChainAggregator : fiche racine -> statistiques cumulées de la chaîne de suites
- SyncService : orchestration par lots de la synchronisation du catalogue
"""
