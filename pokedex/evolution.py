from typing import Any, Mapping

from pokedex.media import extract_id_from_url
from pokedex.models import ChainLink, EvolutionEntry


def flatten_evolution_chain(chain: ChainLink | Mapping[str, Any]) -> list[EvolutionEntry]:
    """
    Flattens an evolution tree into display order.

    Pre-order: a species comes before its evolutions, and sibling branches keep
    the order PokeAPI lists them in. Duplicates are kept.
    """
    if isinstance(chain, Mapping):
        chain = ChainLink.model_validate(chain)

    result: list[EvolutionEntry] = []
    stack = [chain]
    while stack:
        link = stack.pop()
        result.append(
            EvolutionEntry(name=link.species.name, id=extract_id_from_url(link.species.url))
        )
        # Reversed so the first child is popped next
        stack.extend(reversed(link.evolves_to))

    return result
