import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    pokeapi_base_url: str = "https://pokeapi.co/api/v2"
    cache_ttl: float = 1800  # 30 minutes
    http_timeout: float = 5.0
    batch_size: int = 10
    batch_delay: float = 0.1  # seconds between batches, keeps PokeAPI happy
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Reads settings from the environment once per process."""
    defaults = Settings()
    return Settings(
        pokeapi_base_url=os.getenv("POKEAPI_BASE_URL", defaults.pokeapi_base_url).rstrip("/"),
        cache_ttl=os.getenv("POKEDEX_CACHE_TTL", defaults.cache_ttl),
        http_timeout=os.getenv("POKEDEX_HTTP_TIMEOUT", defaults.http_timeout),
        batch_size=os.getenv("POKEDEX_BATCH_SIZE", defaults.batch_size),
        batch_delay=os.getenv("POKEDEX_BATCH_DELAY", defaults.batch_delay),
        log_level=os.getenv("POKEDEX_LOG_LEVEL", defaults.log_level).upper(),
        host=os.getenv("POKEDEX_HOST", defaults.host),
        port=os.getenv("POKEDEX_PORT", defaults.port),
    )
