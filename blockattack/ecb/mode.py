#!/usr/bin/env python3
"""
AES-ECB built by hand from the block primitive.

Principle:
  - pad the plaintext with PKCS#7
  - encrypt every block independently under the same key
  - identical plaintext blocks therefore give identical ciphertext blocks,
    which is what ecb.detect and ecb.oracle_attack exploit

Usage: python3 -m blockattack.ecb.mode
"""

from blockattack.block import block_decrypt, block_encrypt, split_blocks
from blockattack.config import BLOCK_SIZE
from blockattack.errors import TruncatedCiphertextError
from blockattack.padding import pad, unpad


def ecb_encrypt(plaintext: bytes, key: bytes, *, block_size: int = BLOCK_SIZE,
                encrypt_block=block_encrypt) -> bytes:
    padded = pad(plaintext, block_size)
    return b"".join(encrypt_block(key, block) for block in split_blocks(padded, block_size))


def ecb_decrypt(ciphertext: bytes, key: bytes, *, block_size: int = BLOCK_SIZE,
                decrypt_block=block_decrypt, strip_padding: bool = True) -> bytes:
    if not ciphertext or len(ciphertext) % block_size:
        raise TruncatedCiphertextError(
            f"ciphertext length {len(ciphertext)} is not a positive multiple of {block_size}")
    padded = b"".join(decrypt_block(key, block) for block in split_blocks(ciphertext, block_size))
    return unpad(padded, block_size) if strip_padding else padded


if __name__ == "__main__":
    key = b"YELLOW SUBMARINE"
    plaintext = b"YELLOW SUBMARINE" * 2 + b"tail"

    ciphertext = ecb_encrypt(plaintext, key)
    print("AES-128 ECB by hand\n")
    for i, block in enumerate(split_blocks(ciphertext)):
        print(f"Block {i}: {block.hex()}")
    print("\nDecrypted:", ecb_decrypt(ciphertext, key))
