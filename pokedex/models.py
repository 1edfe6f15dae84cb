from __future__ import annotations

from pydantic import BaseModel, Field


# Models for PokeAPI payloads (Internal Contract)
class NamedResource(BaseModel):
    name: str
    url: str


class ListItem(BaseModel):
    name: str
    url: str
    id: int


class ChainLink(BaseModel):
    species: NamedResource
    evolves_to: list[ChainLink] = Field(default_factory=list)


ChainLink.model_rebuild()


class EvolutionEntry(BaseModel):
    name: str
    id: int


# Public API response models
class PokemonSummary(ListItem):
    image_url: str


class EvolutionMember(EvolutionEntry):
    localized_name: str
    image_url: str


class MoveSummary(BaseModel):
    id: int
    name: str
    localized_name: str
    power: int | None = None
    pp: int | None = None
    accuracy: int | None = None
    type: str | None = None
    damage_class: str | None = None


class Stat(BaseModel):
    name: str
    base_stat: int


class Ability(BaseModel):
    name: str
    is_hidden: bool = False


class Sprites(BaseModel):
    front: str
    back: str
    front_shiny: str
    back_shiny: str


class PokemonDetail(BaseModel):
    id: int
    name: str
    localized_name: str
    description: str
    height: int | None = None
    weight: int | None = None
    types: list[str] = Field(default_factory=list)
    abilities: list[Ability] = Field(default_factory=list)
    stats: list[Stat] = Field(default_factory=list)
    sprites: Sprites
    cry_url: str | None = None
    evolution_chain: list[EvolutionMember] = Field(default_factory=list)
