"""Hand-built AES block modes and a byte-at-a-time chosen-plaintext attack on them."""

from blockattack.cbc.mode import cbc_decrypt, cbc_encrypt
from blockattack.ecb.detect import detect_mode, looks_like_ecb
from blockattack.ecb.mode import ecb_decrypt, ecb_encrypt
from blockattack.ecb.oracle_attack import ByteAtATimeAttack, byte_at_a_time
from blockattack.oracle import EncryptionOracle, Mode
from blockattack.padding import pad, unpad

__all__ = [
    "ByteAtATimeAttack",
    "EncryptionOracle",
    "Mode",
    "byte_at_a_time",
    "cbc_decrypt",
    "cbc_encrypt",
    "detect_mode",
    "ecb_decrypt",
    "ecb_encrypt",
    "looks_like_ecb",
    "pad",
    "unpad",
]
