"""Seed normalization and readable random seeds."""

from __future__ import annotations

import random

ADJECTIVES = [
    "ancient",
    "ashen",
    "bitter",
    "bleak",
    "bronze",
    "calm",
    "cold",
    "crimson",
    "dark",
    "deep",
    "dusty",
    "ember",
    "faded",
    "frozen",
    "golden",
    "gray",
    "hollow",
    "iron",
    "jagged",
    "lone",
    "lunar",
    "misty",
    "north",
    "pale",
    "quiet",
    "remote",
    "rugged",
    "silent",
    "silver",
    "stone",
    "swift",
    "vast",
]

NOUNS = [
    "basin",
    "beacon",
    "bluff",
    "cairn",
    "canyon",
    "cape",
    "cliff",
    "delta",
    "dune",
    "fjord",
    "forge",
    "gorge",
    "harbor",
    "isle",
    "knoll",
    "marsh",
    "mesa",
    "moor",
    "peak",
    "plain",
    "range",
    "reach",
    "ridge",
    "shore",
    "spire",
    "steppe",
    "summit",
    "tarn",
    "vale",
    "watch",
]

_EXAMPLE_SEEDS = ["misty-forge-0412", "ashen-ridge-1093", "terminal", "abc"]


class SeedError(ValueError):
    """Raised when a seed string cannot be used."""


def normalize_seed(seed_text: str | None) -> str:
    """Strip surrounding whitespace; any non-empty string is a valid seed."""

    if seed_text is None:
        raise SeedError(_error_message("Seed is required."))
    seed = str(seed_text).strip()
    if not seed:
        raise SeedError(_error_message("Seed cannot be empty."))
    return seed


def random_seed(rng: random.Random | None = None) -> str:
    """Readable random seed such as ``misty-forge-0412``."""

    chooser = rng or random.Random()
    adjective = chooser.choice(ADJECTIVES)
    noun = chooser.choice(NOUNS)
    return f"{adjective}-{noun}-{chooser.randrange(10000):04d}"


def _error_message(reason: str) -> str:
    examples = ", ".join(_EXAMPLE_SEEDS)
    return f"{reason} Examples: {examples}"
