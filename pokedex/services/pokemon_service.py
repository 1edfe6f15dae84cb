import asyncio
import logging

from pokedex.clients.pokeapi_client import PokeAPIClient, RemoteError
from pokedex.evolution import flatten_evolution_chain
from pokedex.localization import clean_flavor_text, get_localized_flavor_text, get_localized_name
from pokedex.media import get_pokemon_cry_url, get_pokemon_image_url
from pokedex.models import (
    Ability,
    EvolutionEntry,
    EvolutionMember,
    MoveSummary,
    PokemonDetail,
    PokemonSummary,
    Sprites,
    Stat,
)

logger = logging.getLogger(__name__)

MOVES_SHOWN = 20


class PokedexService:
    # Service requires the PokeAPI client via Dependency Injection
    def __init__(self, poke_client: PokeAPIClient, batch_size: int = 10, batch_delay: float = 0.1):
        self._poke_client = poke_client
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay

    async def list_pokemon(self, offset: int = 0, limit: int = 60) -> list[PokemonSummary]:
        items = await self._poke_client.fetch_pokemon_paginated(offset, limit)
        return [
            PokemonSummary(**item.model_dump(), image_url=get_pokemon_image_url(item.id))
            for item in items
        ]

    async def search_pokemon(self, query: str, limit: int = 20) -> list[PokemonSummary]:
        """
        Searches the full catalog by name substring, or by number when `query` is numeric.
        """
        query = query.strip().lower()
        if not query:
            return []

        catalog = await self._poke_client.fetch_all_pokemon()
        # ASCII only: "²" or "٣" pass isdigit() but int() rejects them
        if query.isascii() and query.isdecimal():
            matches = [item for item in catalog if item.id == int(query)]
        else:
            matches = [item for item in catalog if query in item.name]

        return [
            PokemonSummary(**item.model_dump(), image_url=get_pokemon_image_url(item.id))
            for item in matches[:limit]
        ]

    async def get_pokemon_detail(self, id_or_name: int | str, language: str = "en") -> PokemonDetail:
        """
        Everything a detail page shows for one Pokemon.

        The entity and its species are required: a RemoteError from either
        propagates. The evolution chain is best-effort.
        """
        pokemon, species = await asyncio.gather(
            self._poke_client.fetch_pokemon(id_or_name),
            self._poke_client.fetch_pokemon_species(id_or_name),
        )

        pokemon_id = pokemon["id"]
        localized_name = get_localized_name(species.get("names", []), language) or pokemon["name"]
        description = clean_flavor_text(
            get_localized_flavor_text(species.get("flavor_text_entries", []), language)
        )

        return PokemonDetail(
            id=pokemon_id,
            name=pokemon["name"],
            localized_name=localized_name,
            description=description,
            height=pokemon.get("height"),
            weight=pokemon.get("weight"),
            types=[
                slot["type"]["name"]
                for slot in sorted(pokemon.get("types", []), key=lambda s: s.get("slot", 0))
            ],
            abilities=[
                Ability(name=entry["ability"]["name"], is_hidden=entry.get("is_hidden", False))
                for entry in pokemon.get("abilities", [])
            ],
            stats=[
                Stat(name=entry["stat"]["name"], base_stat=entry["base_stat"])
                for entry in pokemon.get("stats", [])
            ],
            sprites=Sprites(
                front=get_pokemon_image_url(pokemon_id),
                back=get_pokemon_image_url(pokemon_id, is_back=True),
                front_shiny=get_pokemon_image_url(pokemon_id, is_shiny=True),
                back_shiny=get_pokemon_image_url(pokemon_id, is_shiny=True, is_back=True),
            ),
            cry_url=(pokemon.get("cries") or {}).get("latest") or get_pokemon_cry_url(pokemon_id),
            evolution_chain=await self._load_evolution_chain(species, language),
        )

    async def get_pokemon_moves(
        self, id_or_name: int | str, language: str = "en", limit: int = MOVES_SHOWN
    ) -> list[MoveSummary]:
        """The first `limit` moves of a Pokemon. Moves that fail to load are skipped."""
        pokemon = await self._poke_client.fetch_pokemon(id_or_name)
        move_names = [entry["move"]["name"] for entry in pokemon.get("moves", [])[:limit]]

        results = await asyncio.gather(
            *(self._poke_client.fetch_move(name) for name in move_names),
            return_exceptions=True,
        )

        moves = []
        for name, result in zip(move_names, results):
            if isinstance(result, RemoteError):
                logger.warning(f"Skipping move '{name}': {result.detail}")
                continue
            if isinstance(result, BaseException):
                raise result
            moves.append(self._to_move_summary(result, language))
        return moves

    async def get_move(self, id_or_name: int | str, language: str = "en") -> MoveSummary:
        move = await self._poke_client.fetch_move(id_or_name)
        return self._to_move_summary(move, language)

    # --- Helpers ---

    async def _load_evolution_chain(self, species: dict, language: str) -> list[EvolutionMember]:
        chain_url = (species.get("evolution_chain") or {}).get("url")
        if not chain_url:
            return []

        try:
            evolution_data = await self._poke_client.fetch_evolution_chain(chain_url)
        except RemoteError as e:
            logger.warning(f"Evolution chain unavailable for '{species.get('name')}': {e.detail}")
            return []

        members = flatten_evolution_chain(evolution_data["chain"])
        localized = await self._localize_members(members, language)

        return [
            EvolutionMember(
                name=member.name,
                id=member.id,
                localized_name=localized_name,
                image_url=get_pokemon_image_url(member.id),
            )
            for member, localized_name in zip(members, localized)
        ]

    async def _localize_members(self, members: list[EvolutionEntry], language: str) -> list[str]:
        """
        Resolves a display name per evolution member, in the same order as `members`.

        Species are fetched in batches with a short pause between batches.
        A member whose species cannot be loaded is shown by its slug.
        """
        localized: list[str] = []
        for start in range(0, len(members), self._batch_size):
            if start:
                await asyncio.sleep(self._batch_delay)

            batch = members[start:start + self._batch_size]
            results = await asyncio.gather(
                *(self._poke_client.fetch_pokemon_species(member.id) for member in batch),
                return_exceptions=True,
            )

            for member, result in zip(batch, results):
                if isinstance(result, RemoteError):
                    logger.warning(f"Error loading species for {member.name}: {result.detail}")
                    localized.append(member.name)
                    continue
                if isinstance(result, BaseException):
                    raise result
                localized.append(get_localized_name(result.get("names", []), language) or member.name)

        return localized

    @staticmethod
    def _to_move_summary(move: dict, language: str) -> MoveSummary:
        return MoveSummary(
            id=move.get("id", 0),
            name=move["name"],
            localized_name=get_localized_name(move.get("names", []), language) or move["name"],
            power=move.get("power"),
            pp=move.get("pp"),
            accuracy=move.get("accuracy"),
            type=(move.get("type") or {}).get("name"),
            damage_class=(move.get("damage_class") or {}).get("name"),
        )
