"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py -> rentmatch/ -> src/ -> raíz del proyecto (donde está el .env)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para escrituras batch"
    )

    # Rescore
    rescore_concurrency: int = Field(
        1, ge=1, description="Propiedades que se scorean en paralelo durante un rescore"
    )
    rescore_max_attempts: int = Field(
        3, ge=1, description="Reintentos del job batch ante fallas de persistencia"
    )
    catalog_page_size: int = Field(
        1000, ge=1, description="Filas por request al recorrer el catálogo"
    )

    # Lectura de scores
    match_scores_limit: int = Field(
        50, ge=1, description="Máximo de scores devueltos por usuario"
    )
    top_matches_limit: int = Field(10, ge=1, description="Cantidad de top matches")

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Tablas de Supabase
PREFERENCES_TABLE = "user_preferences"
PROPERTIES_TABLE = "properties"
MATCH_SCORES_TABLE = "match_scores"
