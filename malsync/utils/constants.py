"""
Constantes globales pour malsync.

Ce module contient les constantes utilisees dans l'application:
- Domaine et suffixe de recherche MyAnimeList
- Formats comptes dans les chaines de suites
- Duree par defaut
- Noms des proprietes de la base Notion
"""

# Domaine attendu dans les resultats de recherche
MAL_DOMAIN = "myanimelist.net"

# Suffixe ajoute a chaque requete pour orienter la recherche vers MAL
SEARCH_SUFFIX = "MyAnimeList"

# Marqueur de source quand l'identifiant est deja connu
SEARCH_SKIPPED = "Skipped search for URL"

# Formats comptes dans une chaine (les films, OVA, specials sont ignores)
MAIN_FORMATS = frozenset({"TV", "Manga"})

# Duree par unite (minutes) quand MAL ne fournit pas de duree
DEFAULT_DURATION_MINUTES = 90

# Nombre maximum de tentatives du backoff exponentiel
MAX_RETRIES = 16

# Limite Notion pour un bloc rich_text
NOTION_TEXT_LIMIT = 2000

# Proprietes lues dans la base Notion
PROP_MAL_ID = "MyAnimeList ID"
PROP_TYPE = "Type"
PROP_NAME = "Name"
PROP_SEQUEL_TITLES = "Sequel Titles"
PROP_SKIP = "Skip"
PROP_CLEANED = "Cleaned"
PROP_SKIP_SEQUEL = "Skip Sequel Traverse"

# Proprietes ecrites apres synchronisation
PROP_TOTAL = "Total"
PROP_DURATION = "Duration"
PROP_AIRING_STATUS = "Airing Status"
PROP_WEB_RATING = "Web Rating"
PROP_GENRE = "Genre"
