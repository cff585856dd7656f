"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe MALSYNC_,
et peut optionnellement être fournie via un fichier .env.

Les clés Google sont optionnelles : sans elles, seules les fiches portant déjà
un identifiant MyAnimeList peuvent être synchronisées.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de malsync/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe MALSYNC_.
    Exemple : MALSYNC_BATCH_SIZE=10
    """

    model_config = SettingsConfigDict(
        env_prefix="MALSYNC_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Notion (catalogue)
    notion_api_key: Optional[str] = Field(default=None)
    notion_database_id: Optional[str] = Field(default=None)
    notion_version: str = Field(default="2022-06-28")

    # Google Custom Search (OPTIONNEL - résolution par recherche désactivée sinon)
    google_api_key: Optional[str] = Field(default=None)
    google_search_engine_id: Optional[str] = Field(default=None)

    # Jikan (MyAnimeList)
    jikan_base_url: str = Field(default="https://api.jikan.moe/v4")

    # Backoff exponentiel : délai = base * 2^tentative, plafonné
    backoff_max_retries: int = Field(default=16, ge=0)
    backoff_base_delay: float = Field(default=0.1, ge=0)
    backoff_max_delay: float = Field(default=60.0, ge=0)

    # Traitement par lots
    batch_size: int = Field(default=15, ge=1)
    batch_pause_seconds: float = Field(default=15.0, ge=0)

    # Cache API
    cache_dir: Path = Field(default=Path(".cache/api"))

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/malsync.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)
    # Seuil console des messages de relance (rate limit)
    log_retry_level: str = Field(default="WARNING")

    @field_validator("cache_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def notion_enabled(self) -> bool:
        """Vérifie si le catalogue Notion est configuré."""
        return bool(self.notion_api_key and self.notion_database_id)

    @property
    def search_enabled(self) -> bool:
        """Vérifie si la recherche Google est configurée."""
        return bool(self.google_api_key and self.google_search_engine_id)
