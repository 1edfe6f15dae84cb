"""Client modules for external API communication."""
from .pokeapi_client import PokeAPIClient, RemoteError

__all__ = [
    'PokeAPIClient',
    'RemoteError',
]
