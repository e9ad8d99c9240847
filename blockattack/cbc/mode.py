#!/usr/bin/env python3
"""
AES-CBC built by hand from the block primitive.

Principle:
  - C[0] = E(K, P[0] xor IV)
  - C[i] = E(K, P[i] xor C[i-1])
  - decryption: P[i] = D(K, C[i]) xor C[i-1], the chain value is always the
    previous *ciphertext* block, never the decrypted output

Only the single-block primitive, strxor and PKCS#7 padding are used; no
library CBC code is involved.

Usage: python3 -m blockattack.cbc.mode
"""

from Crypto.Util.strxor import strxor

from blockattack.block import block_decrypt, block_encrypt, split_blocks
from blockattack.config import BLOCK_SIZE
from blockattack.errors import (InvalidIVLengthError, InvalidKeyLengthError,
                                TruncatedCiphertextError)
from blockattack.padding import pad, unpad


def _check_key_iv(key: bytes, iv: bytes, block_size: int) -> None:
    if len(key) != block_size:
        raise InvalidKeyLengthError(f"key must be {block_size} bytes, got {len(key)}")
    if len(iv) != block_size:
        raise InvalidIVLengthError(f"IV must be {block_size} bytes, got {len(iv)}")


def cbc_encrypt(plaintext: bytes, key: bytes, iv: bytes, *, block_size: int = BLOCK_SIZE,
                encrypt_block=block_encrypt) -> bytes:
    _check_key_iv(key, iv, block_size)

    chain = bytes(iv)
    out = []
    for block in split_blocks(pad(plaintext, block_size), block_size):
        chain = encrypt_block(key, strxor(block, chain))
        out.append(chain)
    return b"".join(out)


def cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes, *, block_size: int = BLOCK_SIZE,
                decrypt_block=block_decrypt, strip_padding: bool = True) -> bytes:
    _check_key_iv(key, iv, block_size)
    if not ciphertext or len(ciphertext) % block_size:
        raise TruncatedCiphertextError(
            f"ciphertext length {len(ciphertext)} is not a positive multiple of {block_size}")

    chain = bytes(iv)
    out = []
    for block in split_blocks(ciphertext, block_size):
        out.append(strxor(decrypt_block(key, block), chain))
        chain = block
    padded = b"".join(out)
    return unpad(padded, block_size) if strip_padding else padded


if __name__ == "__main__":
    key = b"YELLOW SUBMARINE"
    iv = bytes(BLOCK_SIZE)
    plaintext = b"Hello, World!!!!0123456789ABCDEF"

    ciphertext = cbc_encrypt(plaintext, key, iv)
    print("AES-128 CBC by hand\n")
    print("IV        :", iv.hex())
    print("Ciphertext:", ciphertext.hex())
    print("Decrypted :", cbc_decrypt(ciphertext, key, iv))
