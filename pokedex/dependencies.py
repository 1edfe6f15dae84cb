from pokedex.clients import PokeAPIClient
from pokedex.config import Settings, get_settings
from pokedex.services import PokedexService
from fastapi import Depends

_poke_client = None


def get_poke_client() -> PokeAPIClient:
    global _poke_client
    if _poke_client is None:
        _poke_client = PokeAPIClient()
    return _poke_client


async def close_poke_client():
    global _poke_client
    if _poke_client is not None:
        await _poke_client.close()
        _poke_client = None


def get_pokedex_service(
    poke_client: PokeAPIClient = Depends(get_poke_client),
    settings: Settings = Depends(get_settings),
) -> PokedexService:
    return PokedexService(
        poke_client=poke_client,
        batch_size=settings.batch_size,
        batch_delay=settings.batch_delay,
    )
