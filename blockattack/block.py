"""
Atomic AES-128 block primitive.

block_encrypt/block_decrypt transform exactly one block under a 16-byte key.
Every mode in this package is built on top of these two calls; nothing else
touches AES directly.
"""

from typing import List

from Crypto.Cipher import AES

from blockattack.config import BLOCK_SIZE
from blockattack.errors import InvalidBlockLengthError, InvalidKeyLengthError


def _check(key: bytes, block: bytes) -> None:
    if len(key) != BLOCK_SIZE:
        raise InvalidKeyLengthError(f"key must be {BLOCK_SIZE} bytes, got {len(key)}")
    if len(block) != BLOCK_SIZE:
        raise InvalidBlockLengthError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")


def block_encrypt(key: bytes, block: bytes) -> bytes:
    _check(key, block)
    return AES.new(key, AES.MODE_ECB).encrypt(block)


def block_decrypt(key: bytes, block: bytes) -> bytes:
    _check(key, block)
    return AES.new(key, AES.MODE_ECB).decrypt(block)


def split_blocks(data: bytes, block_size: int = BLOCK_SIZE) -> List[bytes]:
    """Split data into block_size chunks; a trailing partial chunk is dropped."""
    return [data[i:i + block_size] for i in range(0, len(data) - block_size + 1, block_size)]
