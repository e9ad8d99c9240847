"""
Randomness sources.

Anything exposing randbytes(n), randint(a, b) and choice(seq) can drive the
oracles: random.Random(seed) pins exact sequences in tests, StrongRandom
draws from pycryptodome's Crypto.Random for real use.
"""

from Crypto.Random import get_random_bytes
from Crypto.Random import random as crypto_random


class StrongRandom:
    def randbytes(self, n: int) -> bytes:
        return get_random_bytes(n)

    def randint(self, a: int, b: int) -> int:
        return crypto_random.randint(a, b)

    def choice(self, seq):
        return crypto_random.choice(seq)


def default_rng(rng=None):
    """Return rng, or a fresh StrongRandom when none is given."""
    return StrongRandom() if rng is None else rng
