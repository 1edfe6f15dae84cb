import re

SPRITES_BASE_URL = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon"
CRIES_BASE_URL = "https://raw.githubusercontent.com/PokeAPI/cries/main/cries/pokemon"

_TRAILING_ID = re.compile(r"/(\d+)/$")


def extract_id_from_url(url: str) -> int:
    """Parses the trailing numeric path segment of a resource URL, 0 if there is none."""
    match = _TRAILING_ID.search(url or "")
    return int(match.group(1)) if match else 0


def get_pokemon_image_url(pokemon_id: int, is_shiny: bool = False, is_back: bool = False) -> str:
    shiny_path = "shiny/" if is_shiny else ""
    direction = "back/" if is_back else ""
    return f"{SPRITES_BASE_URL}/{shiny_path}{direction}{pokemon_id}.png"


def get_pokemon_cry_url(pokemon_id: int, legacy: bool = False) -> str:
    variant = "legacy" if legacy else "latest"
    return f"{CRIES_BASE_URL}/{variant}/{pokemon_id}.ogg"
