#!/usr/bin/env python3
"""
ECB cut-and-paste profile forgery

A service hands out AES-ECB(K, profile_for(email)) tokens, where
profile_for("foo@bar.com") == "email=foo@bar.com&uid=10&role=user".
The email is sanitized ('&', '=' and '%' are eaten), so role=admin cannot be
injected directly.

Principle:
  1. Register an email whose length pushes "role=" to the end of a block;
     the first blocks of that token encrypt "email=...&uid=10&role=".
  2. Register an email that puts "admin" + PKCS#7 padding alone in a block;
     that block encrypts a valid last block reading "admin".
  3. In ECB each block encrypts independently, so pasting the block from
     step 2 after the blocks from step 1 gives a token for role=admin.

Usage: python3 -m blockattack.ecb.token_forgery
"""

import logging
from typing import Dict

from blockattack.config import BLOCK_SIZE
from blockattack.ecb.mode import ecb_decrypt, ecb_encrypt
from blockattack.errors import ProfileError
from blockattack.padding import pad
from blockattack.rng import default_rng

logger = logging.getLogger(__name__)

PROFILE_HEAD = "email="
PROFILE_ROLE = "&uid=10&role="


def parse_profile(text: str) -> Dict[str, str]:
    """Parse 'foo=bar&baz=qux' into an ordered dict."""
    profile = {}
    for pair in text.split("&"):
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ProfileError(f"malformed pair {pair!r}")
        profile[key] = value
    return profile


def profile_for(email: str) -> str:
    for metachar in "&=%":
        email = email.replace(metachar, "_")
    return f"{PROFILE_HEAD}{email}{PROFILE_ROLE}user"


class ProfileService:
    def __init__(self, rng=None):
        rng = default_rng(rng)
        self._key = rng.randbytes(BLOCK_SIZE)
        self._users = set()

    def register(self, email: str) -> bytes:
        profile = profile_for(email)
        self._users.add(parse_profile(profile)["email"])
        return ecb_encrypt(profile.encode(), self._key)

    def login(self, token: bytes) -> Dict[str, str]:
        try:
            text = ecb_decrypt(token, self._key).decode()
        except UnicodeDecodeError as e:
            raise ProfileError("token does not decrypt to text") from e
        profile = parse_profile(text)
        if profile.get("email") not in self._users:
            raise ProfileError("unknown user")
        return profile


def forge_admin_token(service: ProfileService, block_size: int = BLOCK_SIZE) -> bytes:
    # 1) "email=<x...>&uid=10&role=" fills whole blocks
    used = len(PROFILE_HEAD) + len(PROFILE_ROLE)
    email_length = -used % block_size
    head_blocks = (used + email_length) // block_size
    head = service.register("x" * email_length)[:head_blocks * block_size]

    # 2) "admin" + padding starts right after "email=<push>"
    push = -len(PROFILE_HEAD) % block_size
    admin_index = (len(PROFILE_HEAD) + push) // block_size
    admin_block = pad(b"admin", block_size).decode()
    token = service.register("y" * push + admin_block)
    tail = token[admin_index * block_size:(admin_index + 1) * block_size]

    logger.info("forged token from %d head blocks + admin block %d", head_blocks, admin_index)
    return head + tail


if __name__ == "__main__":
    print("AES-128 ECB cut-and-paste\n")
    service = ProfileService()
    print("Honest profile:", service.login(service.register("foo@bar.com&role=admin")))

    forged = forge_admin_token(service)
    for i in range(len(forged) // BLOCK_SIZE):
        print(f"Block {i}:", forged[i * BLOCK_SIZE:(i + 1) * BLOCK_SIZE].hex())
    print(f"\nMalicious token: {forged.hex()}")
    print("Login result   :", service.login(forged))
