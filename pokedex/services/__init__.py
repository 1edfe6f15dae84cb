"""Service layer assembling client data into API responses."""
from .pokemon_service import PokedexService

__all__ = ['PokedexService']
