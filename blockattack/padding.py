"""
PKCS#7 padding.

pad() always appends between 1 and block_size bytes, each holding the pad
length, so an already aligned input gets a whole extra block. unpad() rejects
anything that pad() could not have produced.
"""

from blockattack.config import BLOCK_SIZE
from blockattack.errors import InvalidPaddingError


def _check_block_size(block_size: int) -> None:
    if not 1 <= block_size <= 255:
        raise ValueError(f"block size must be in 1..255, got {block_size}")


def pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    _check_block_size(block_size)
    n = block_size - len(data) % block_size
    return bytes(data) + bytes([n]) * n


def unpad(padded: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    _check_block_size(block_size)
    if not padded:
        raise InvalidPaddingError("cannot unpad empty input")
    n = padded[-1]
    if n == 0 or n > block_size or n > len(padded):
        raise InvalidPaddingError(f"invalid pad length {n}")
    if padded[-n:] != bytes([n]) * n:
        raise InvalidPaddingError(f"last {n} bytes are not all {n:#04x}")
    return bytes(padded[:-n])
