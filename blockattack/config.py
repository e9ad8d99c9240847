# blockattack/config.py
# Configuration for the oracles and the byte-at-a-time attack

import logging
import os

from Crypto.Cipher import AES

# AES block size in bytes (16 bytes for AES-128)
BLOCK_SIZE = AES.block_size

# Length range (inclusive) of the hidden prefix/suffix drawn by EncryptionOracle
AFFIX_LENGTH_RANGE = (0, 256)

# Length range of the random bytes wrapped around the input in the detection game
DETECTION_AFFIX_RANGE = (5, 10)

# Filler bytes used by the attack. ALT_FILLER must differ from FILLER:
# prefix discovery runs both and only trusts repeats present in the two runs.
FILLER = b"A"
ALT_FILLER = b"B"

# Largest block size guess_block_size() will probe for
MAX_BLOCK_SIZE = 64

# Network config for the HTTP oracle
HOST = "127.0.0.1"
PORT = 1337

# Logging level (override with BLOCKATTACK_LOG_LEVEL=DEBUG)
LOG_LEVEL = os.environ.get("BLOCKATTACK_LOG_LEVEL", "INFO")


def configure_logging(level=LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
