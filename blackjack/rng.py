"""Random sources for shuffling."""

import os
import secrets
from random import Random

FIXED_SEED = 12345


def crypto_seeded_rng() -> Random:
    """Return a generator seeded from the operating system's CSPRNG."""
    return Random(secrets.randbits(64))


def fixed_seeded_rng(seed: int = FIXED_SEED) -> Random:
    """Return a generator with a fixed seed, for reproducible games."""
    return Random(seed)


def new_rng(seeded: bool | None = None, seed: int = FIXED_SEED) -> Random:
    """
    Build the random source for a game.

    Args:
        seeded: Use a fixed seed. Defaults to BLACKJACK_SEEDED=1 in the environment.
        seed: Seed used when seeded
    """
    if seeded is None:
        seeded = os.getenv("BLACKJACK_SEEDED") == "1"
    if seeded:
        return fixed_seeded_rng(seed)
    return crypto_seeded_rng()
