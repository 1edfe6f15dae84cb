import pytest
from unittest.mock import AsyncMock
from pokedex.clients.pokeapi_client import RemoteError
from pokedex.models import ListItem, PokemonDetail
from pokedex.services.pokemon_service import PokedexService


BASE = "https://pokeapi.co/api/v2"
CHAIN_URL = f"{BASE}/evolution-chain/10/"


def species_payload(species_id, slug, names, flavor_texts=(), chain_url=CHAIN_URL):
    return {
        "id": species_id,
        "name": slug,
        "names": [{"language": {"name": lang}, "name": name} for lang, name in names],
        "flavor_text_entries": [
            {"language": {"name": lang}, "flavor_text": text} for lang, text in flavor_texts
        ],
        "evolution_chain": {"url": chain_url} if chain_url else None,
    }


MOCK_POKEMON = {
    "id": 25,
    "name": "pikachu",
    "height": 4,
    "weight": 60,
    "types": [{"slot": 1, "type": {"name": "electric", "url": f"{BASE}/type/13/"}}],
    "abilities": [
        {"ability": {"name": "static", "url": ""}, "is_hidden": False, "slot": 1},
        {"ability": {"name": "lightning-rod", "url": ""}, "is_hidden": True, "slot": 3},
    ],
    "stats": [{"base_stat": 35, "stat": {"name": "hp", "url": ""}}],
    "cries": {"latest": "https://example.test/cries/25.ogg", "legacy": ""},
    "moves": [{"move": {"name": f"move-{i}", "url": ""}} for i in range(25)],
}

SPECIES = {
    25: species_payload(
        25, "pikachu",
        [("en", "Pikachu"), ("fr", "Pikachu (FR)"), ("ja", "ピカチュウ")],
        [("en", "When several of\nthese POKéMON\fgather."), ("ja", "でんきねずみ")],
    ),
    172: species_payload(172, "pichu", [("en", "Pichu"), ("ja", "ピチュー")]),
    26: species_payload(26, "raichu", [("en", "Raichu"), ("ja", "ライチュウ")]),
}

MOCK_CHAIN = {
    "id": 10,
    "chain": {
        "species": {"name": "pichu", "url": f"{BASE}/pokemon-species/172/"},
        "evolves_to": [
            {
                "species": {"name": "pikachu", "url": f"{BASE}/pokemon-species/25/"},
                "evolves_to": [
                    {"species": {"name": "raichu", "url": f"{BASE}/pokemon-species/26/"}, "evolves_to": []}
                ],
            }
        ],
    },
}


async def fetch_species(id_or_name):
    key = 25 if id_or_name == "pikachu" else int(id_or_name)
    return SPECIES[key]


@pytest.fixture
def poke_client():
    # Use AsyncMock for methods that are awaited
    client = AsyncMock()
    client.fetch_pokemon.return_value = MOCK_POKEMON
    client.fetch_pokemon_species.side_effect = fetch_species
    client.fetch_evolution_chain.return_value = MOCK_CHAIN
    return client


@pytest.fixture
def pokedex_service(poke_client):
    return PokedexService(poke_client=poke_client, batch_size=2, batch_delay=0)


@pytest.mark.asyncio
async def test_detail_in_japanese(pokedex_service, poke_client):
    result = await pokedex_service.get_pokemon_detail("pikachu", "ja")

    assert isinstance(result, PokemonDetail)
    poke_client.fetch_pokemon.assert_called_once_with("pikachu")
    poke_client.fetch_evolution_chain.assert_called_once_with(CHAIN_URL)

    assert result.localized_name == "ピカチュウ"
    assert result.description == "でんきねずみ"
    assert result.types == ["electric"]
    assert [a.name for a in result.abilities if a.is_hidden] == ["lightning-rod"]
    assert result.cry_url == "https://example.test/cries/25.ogg"
    assert result.sprites.back_shiny.endswith("/shiny/back/25.png")
    # Pre-order, localized per member
    assert [(m.name, m.id, m.localized_name) for m in result.evolution_chain] == [
        ("pichu", 172, "ピチュー"),
        ("pikachu", 25, "ピカチュウ"),
        ("raichu", 26, "ライチュウ"),
    ]


@pytest.mark.asyncio
async def test_detail_falls_back_to_english(pokedex_service):
    result = await pokedex_service.get_pokemon_detail(25, "de")

    assert result.localized_name == "Pikachu"
    assert result.description == "When several of these POKéMON gather."


@pytest.mark.asyncio
async def test_detail_with_unknown_language_is_english(pokedex_service):
    result = await pokedex_service.get_pokemon_detail(25, "zzz")

    assert result.localized_name == "Pikachu"
    assert [m.localized_name for m in result.evolution_chain] == ["Pichu", "Pikachu", "Raichu"]


@pytest.mark.asyncio
async def test_missing_pokemon_propagates(pokedex_service, poke_client):
    poke_client.fetch_pokemon.side_effect = RemoteError(f"{BASE}/pokemon/missingno", 404, "not found")

    with pytest.raises(RemoteError) as excinfo:
        await pokedex_service.get_pokemon_detail("missingno")

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_evolution_member_failure_uses_slug(pokedex_service, poke_client):
    async def flaky_species(id_or_name):
        if id_or_name == 26:
            raise RemoteError(f"{BASE}/pokemon-species/26", 500, "boom")
        return await fetch_species(id_or_name)

    poke_client.fetch_pokemon_species.side_effect = flaky_species

    result = await pokedex_service.get_pokemon_detail(25, "ja")

    assert [m.localized_name for m in result.evolution_chain] == ["ピチュー", "ピカチュウ", "raichu"]


@pytest.mark.asyncio
async def test_evolution_chain_failure_yields_empty_chain(pokedex_service, poke_client):
    poke_client.fetch_evolution_chain.side_effect = RemoteError(CHAIN_URL, None, "network error")

    result = await pokedex_service.get_pokemon_detail(25)

    assert result.evolution_chain == []
    assert result.localized_name == "Pikachu"


@pytest.mark.asyncio
async def test_species_without_chain_skips_fetch(pokedex_service, poke_client):
    poke_client.fetch_pokemon_species.side_effect = None
    poke_client.fetch_pokemon_species.return_value = species_payload(
        128, "tauros", [("en", "Tauros")], chain_url=None
    )

    result = await pokedex_service.get_pokemon_detail(128)

    assert result.evolution_chain == []
    poke_client.fetch_evolution_chain.assert_not_called()


@pytest.mark.asyncio
async def test_moves_are_capped_and_failures_skipped(pokedex_service, poke_client):
    async def fetch_move(name):
        if name == "move-3":
            raise RemoteError(f"{BASE}/move/{name}", 404, "not found")
        index = int(name.split("-")[1])
        return {
            "id": index,
            "name": name,
            "names": [{"language": {"name": "en"}, "name": name.title()}],
            "power": 40,
            "pp": 30,
            "accuracy": 100,
            "type": {"name": "electric"},
            "damage_class": {"name": "special"},
        }

    poke_client.fetch_move.side_effect = fetch_move

    moves = await pokedex_service.get_pokemon_moves("pikachu", "fr")

    assert poke_client.fetch_move.await_count == 20
    assert len(moves) == 19
    assert "move-3" not in [m.name for m in moves]
    # Results stay in the Pokemon's move order
    assert [m.id for m in moves][:4] == [0, 1, 2, 4]
    assert moves[0].localized_name == "Move-0"
    assert moves[0].damage_class == "special"


@pytest.mark.asyncio
async def test_get_move_propagates_errors(pokedex_service, poke_client):
    poke_client.fetch_move.side_effect = RemoteError(f"{BASE}/move/nope", 404, "not found")

    with pytest.raises(RemoteError):
        await pokedex_service.get_move("nope")


@pytest.mark.asyncio
async def test_search_by_name_and_number(pokedex_service, poke_client):
    poke_client.fetch_all_pokemon.return_value = [
        ListItem(name="pichu", url=f"{BASE}/pokemon/172/", id=1),
        ListItem(name="pikachu", url=f"{BASE}/pokemon/25/", id=2),
        ListItem(name="raichu", url=f"{BASE}/pokemon/26/", id=3),
    ]

    by_name = await pokedex_service.search_pokemon("  PIKA ")
    by_number = await pokedex_service.search_pokemon("3")
    nothing = await pokedex_service.search_pokemon("   ")

    assert [p.name for p in by_name] == ["pikachu"]
    # Numbers follow the bulk list's positional ids
    assert [p.name for p in by_number] == ["raichu"]
    assert nothing == []


@pytest.mark.asyncio
async def test_list_pokemon_adds_sprites(pokedex_service, poke_client):
    poke_client.fetch_pokemon_paginated.return_value = [
        ListItem(name="bulbasaur", url=f"{BASE}/pokemon/1/", id=1),
    ]

    result = await pokedex_service.list_pokemon(0, 1)

    poke_client.fetch_pokemon_paginated.assert_called_once_with(0, 1)
    assert result[0].image_url.endswith("/pokemon/1.png")


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["²", "٣", "1²"])
async def test_search_with_non_ascii_digits_matches_nothing(pokedex_service, poke_client, query):
    poke_client.fetch_all_pokemon.return_value = [
        ListItem(name="bulbasaur", url=f"{BASE}/pokemon/1/", id=1),
        ListItem(name="ivysaur", url=f"{BASE}/pokemon/2/", id=2),
        ListItem(name="venusaur", url=f"{BASE}/pokemon/3/", id=3),
    ]

    assert await pokedex_service.search_pokemon(query) == []


@pytest.mark.asyncio
async def test_evolution_members_sharing_id_zero_keep_their_own_names(pokedex_service, poke_client):
    poke_client.fetch_evolution_chain.return_value = {
        "id": 99,
        "chain": {
            "species": {"name": "a", "url": "bad"},
            "evolves_to": [{"species": {"name": "b", "url": "bad"}, "evolves_to": []}],
        },
    }

    async def species(id_or_name):
        if id_or_name == 0:
            raise RemoteError(f"{BASE}/pokemon-species/0", 404, "not found")
        return await fetch_species(id_or_name)

    poke_client.fetch_pokemon_species.side_effect = species

    result = await pokedex_service.get_pokemon_detail(25)

    assert [(m.name, m.id, m.localized_name) for m in result.evolution_chain] == [
        ("a", 0, "a"),
        ("b", 0, "b"),
    ]
