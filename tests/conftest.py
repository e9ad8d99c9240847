import random

import pytest

KEY = b"YELLOW SUBMARINE"


@pytest.fixture
def rng():
    return random.Random(1337)


@pytest.fixture
def key():
    return KEY
