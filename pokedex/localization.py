"""
Picks the display string for a language out of PokeAPI's per-language lists.

Both resolvers apply the same policy: the requested language if supported and
present, else English, else the empty string. An unsupported language tag is
treated as a request for English.
"""
import re
from typing import Any, Iterable, Mapping

SUPPORTED_LANGUAGES = ("en", "fr", "es", "de", "ja")
FALLBACK_LANGUAGE = "en"

# Form feeds, soft hyphens and hard line breaks from the game text dumps
_FLAVOR_TEXT_BREAKS = re.compile(r"[\n\f\r\u00ad]+")
_WHITESPACE_RUNS = re.compile(r"\s{2,}")


def normalize_language(language: str | None) -> str:
    return language if language in SUPPORTED_LANGUAGES else FALLBACK_LANGUAGE


def _language_of(entry: Mapping[str, Any]) -> str | None:
    return (entry.get("language") or {}).get("name")


def _resolve(entries: Iterable[Mapping[str, Any]], field: str, language: str | None) -> str:
    entries = list(entries or [])
    target = normalize_language(language)

    for wanted in (target, FALLBACK_LANGUAGE):
        value = next(
            (entry.get(field) for entry in entries if _language_of(entry) == wanted),
            None,
        )
        # An empty string counts as missing, so it falls through to English
        if value:
            return value

    return ""


def get_localized_name(names: Iterable[Mapping[str, Any]], language: str | None) -> str:
    """Resolves a `names` list (species, move, ...) to one display name."""
    return _resolve(names, "name", language)


def get_localized_flavor_text(flavor_texts: Iterable[Mapping[str, Any]], language: str | None) -> str:
    """Resolves a `flavor_text_entries` list to one description."""
    return _resolve(flavor_texts, "flavor_text", language)


def clean_flavor_text(text: str) -> str:
    cleaned = _FLAVOR_TEXT_BREAKS.sub(" ", text or "")
    return _WHITESPACE_RUNS.sub(" ", cleaned).strip()
