import logging
import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Query
from pokedex.config import get_settings
from pokedex.services.pokemon_service import PokedexService
from pokedex.dependencies import get_pokedex_service, close_poke_client
from pokedex.models import MoveSummary, PokemonDetail, PokemonSummary


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger("pokedex").setLevel(get_settings().log_level)
    yield
    await close_poke_client()


app = FastAPI(
    title="Pokedex API",
    description="Cached, localized read-only access to PokeAPI species data.",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# Catalog pages. Upstream failures yield an empty page, not an error.
@app.get(
    "/pokemon",
    response_model=list[PokemonSummary],
    summary="Returns one page of the Pokemon catalog",
)
async def list_pokemon(
    offset: int = Query(0, ge=0),
    limit: int = Query(60, gt=0, le=200),
    service: PokedexService = Depends(get_pokedex_service),
):
    return await service.list_pokemon(offset, limit)


# Declared before /pokemon/{id_or_name} so "search" is not taken as a name
@app.get(
    "/pokemon/search",
    response_model=list[PokemonSummary],
    summary="Searches the full catalog by name or number",
)
async def search_pokemon(
    q: str = Query("", max_length=50),
    limit: int = Query(20, gt=0, le=200),
    service: PokedexService = Depends(get_pokedex_service),
):
    return await service.search_pokemon(q, limit)


@app.get(
    "/pokemon/{id_or_name}",
    response_model=PokemonDetail,
    summary="Returns localized details and evolution chain for one Pokemon",
)
async def get_pokemon_detail(
    id_or_name: str,
    lang: str = "en",
    service: PokedexService = Depends(get_pokedex_service),
):
    """Unknown language tags fall back to English."""
    # RemoteError is an HTTPException: upstream 404 -> 404, anything else -> 503
    return await service.get_pokemon_detail(id_or_name, lang)


@app.get(
    "/pokemon/{id_or_name}/moves",
    response_model=list[MoveSummary],
    summary="Returns the first moves of a Pokemon, skipping any that fail to load",
)
async def get_pokemon_moves(
    id_or_name: str,
    lang: str = "en",
    limit: int = Query(20, gt=0, le=100),
    service: PokedexService = Depends(get_pokedex_service),
):
    return await service.get_pokemon_moves(id_or_name, lang, limit)


@app.get(
    "/moves/{id_or_name}",
    response_model=MoveSummary,
    summary="Returns one move with its localized name",
)
async def get_move(
    id_or_name: str,
    lang: str = "en",
    service: PokedexService = Depends(get_pokedex_service),
):
    return await service.get_move(id_or_name, lang)


def serve():
    """Console entry point: runs the API with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
