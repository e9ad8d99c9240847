"""
Encryption oracle with a hidden key, mode, prefix and suffix.

The oracle draws everything it does not receive explicitly from its random
source once, at construction, and never changes it afterwards:

    query(data) = E_mode(K, pad(prefix || data || suffix))

ECB queries are deterministic. CBC queries differ only by the fresh IV drawn
for each call, which is not returned. Neither the key nor the mode is exposed;
tests that need a ground truth force them through the constructor.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum

from blockattack.cbc.mode import cbc_encrypt
from blockattack.config import AFFIX_LENGTH_RANGE, BLOCK_SIZE
from blockattack.ecb.mode import ecb_encrypt
from blockattack.errors import InvalidKeyLengthError
from blockattack.rng import default_rng

logger = logging.getLogger(__name__)


class Mode(Enum):
    ECB = "ecb"
    CBC = "cbc"


@dataclass(frozen=True)
class OracleConfiguration:
    key: bytes = field(repr=False)
    mode: Mode = field(repr=False)
    prefix: bytes = field(repr=False)
    suffix: bytes = field(repr=False)


class EncryptionOracle:
    def __init__(self, rng=None, *, key=None, mode=None, prefix=None, suffix=None,
                 prefix_range=AFFIX_LENGTH_RANGE, suffix_range=AFFIX_LENGTH_RANGE,
                 block_size=BLOCK_SIZE):
        self._rng = default_rng(rng)
        self.block_size = block_size

        if key is None:
            key = self._rng.randbytes(block_size)
        elif len(key) != block_size:
            raise InvalidKeyLengthError(f"key must be {block_size} bytes, got {len(key)}")
        if mode is None:
            mode = self._rng.choice((Mode.ECB, Mode.CBC))
        if prefix is None:
            prefix = self._rng.randbytes(self._rng.randint(*prefix_range))
        if suffix is None:
            suffix = self._rng.randbytes(self._rng.randint(*suffix_range))

        self._config = OracleConfiguration(bytes(key), Mode(mode), bytes(prefix), bytes(suffix))
        # IV draws and the query counter are shared between threads
        self._lock = threading.Lock()
        self._queries = 0
        logger.debug("oracle ready (block size %d)", block_size)

    def __repr__(self):
        return f"<EncryptionOracle block_size={self.block_size} queries={self._queries}>"

    @property
    def query_count(self) -> int:
        return self._queries

    def query(self, data: bytes) -> bytes:
        config = self._config
        plaintext = config.prefix + bytes(data) + config.suffix

        with self._lock:
            self._queries += 1
            iv = self._rng.randbytes(self.block_size) if config.mode is Mode.CBC else None

        if iv is None:
            return ecb_encrypt(plaintext, config.key, block_size=self.block_size)
        return cbc_encrypt(plaintext, config.key, iv, block_size=self.block_size)
