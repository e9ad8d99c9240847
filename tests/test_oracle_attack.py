import random

import pytest

from blockattack.ecb.mode import ecb_encrypt
from blockattack.ecb.oracle_attack import SECRET, Alignment, ByteAtATimeAttack, byte_at_a_time
from blockattack.errors import (AlignmentNotFoundError, BlockSizeNotFoundError,
                                ByteNotRecoverableError)
from blockattack.oracle import EncryptionOracle, Mode

ROLLIN = b"Rollin' in my 5.0"


def ecb_oracle(rng, prefix=None, suffix=ROLLIN):
    return EncryptionOracle(rng, mode=Mode.ECB, prefix=prefix, suffix=suffix)


class ConstantLengthOracle:
    def query(self, data):
        return bytes(32)


class ShiftingSuffixOracle:
    """ECB, but the 20 secret bytes change on every call."""

    def __init__(self, rng):
        self.rng = rng
        self.key = rng.randbytes(16)

    def query(self, data):
        return ecb_encrypt(data + self.rng.randbytes(20), self.key)


class LossyOracle:
    """ECB over a 'cipher' that forgets the top bit of each block's last byte."""

    def query(self, data):
        return ecb_encrypt(data + b"hi", bytes(16),
                           encrypt_block=lambda key, block: block[:-1] + bytes([block[-1] & 0x7f]))


@pytest.mark.parametrize("mode", [Mode.ECB, Mode.CBC])
def test_guess_block_size(rng, mode):
    attack = ByteAtATimeAttack(EncryptionOracle(rng, mode=mode))
    assert attack.guess_block_size() == 16


def test_guess_block_size_gives_up():
    with pytest.raises(BlockSizeNotFoundError):
        ByteAtATimeAttack(ConstantLengthOracle()).guess_block_size(max_block_size=8)


def test_alignment_from_prefix():
    assert Alignment.from_prefix(16, 0) == Alignment(16, 0, 0, 0)
    assert Alignment.from_prefix(16, 5) == Alignment(16, 5, 11, 1)
    assert Alignment.from_prefix(16, 32) == Alignment(16, 32, 0, 2)
    assert Alignment.from_prefix(16, 33).aligned_length == 48


@pytest.mark.parametrize("prefix_length", range(0, 49))
def test_find_alignment_for_every_prefix_length(rng, prefix_length):
    attack = ByteAtATimeAttack(ecb_oracle(rng, prefix=rng.randbytes(prefix_length)))
    assert attack.find_alignment(16) == Alignment.from_prefix(16, prefix_length)


LOOKALIKE_SECRET = b"A" * 40 + b"B" * 40 + b"tail"


@pytest.mark.parametrize("prefix", [
    b"A" * 16,
    b"A" * 20,
    b"\x00" * 3 + b"A" * 13,
    b"B" * 7 + b"A" * 9,
    b"A" * 3,
])
def test_find_alignment_with_filler_lookalikes(prefix):
    oracle = ecb_oracle(random.Random(5), prefix=prefix, suffix=LOOKALIKE_SECRET)
    assert ByteAtATimeAttack(oracle).find_alignment(16).prefix_length == len(prefix)


def test_recover_secret_made_of_filler_bytes():
    oracle = ecb_oracle(random.Random(5), prefix=b"\x00" * 3 + b"A" * 13, suffix=LOOKALIKE_SECRET)
    assert byte_at_a_time(oracle) == LOOKALIKE_SECRET


def test_find_alignment_rejects_cbc(rng):
    with pytest.raises(AlignmentNotFoundError):
        ByteAtATimeAttack(EncryptionOracle(rng, mode=Mode.CBC)).find_alignment(16)


@pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 33])
def test_suffix_length(rng, length):
    attack = ByteAtATimeAttack(ecb_oracle(rng, prefix=rng.randbytes(21), suffix=rng.randbytes(length)))
    assert attack.suffix_length(attack.find_alignment(16)) == length


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_recovers_rollin_behind_random_prefix(seed):
    rng = random.Random(seed)
    oracle = ecb_oracle(rng, prefix=rng.randbytes(rng.randint(0, 256)))
    attack = ByteAtATimeAttack(oracle)
    assert attack.recover() == ROLLIN
    assert attack.block_size == 16
    assert attack.secret_length == len(ROLLIN)


def test_recover_without_prefix(rng):
    assert byte_at_a_time(ecb_oracle(rng, prefix=b"")) == ROLLIN


def test_recover_full_secret_with_workers(rng):
    oracle = ecb_oracle(rng, prefix=rng.randbytes(37), suffix=SECRET)
    assert byte_at_a_time(oracle, workers=4) == SECRET
    assert SECRET.startswith(ROLLIN)


def test_recover_binary_secret(rng):
    secret = b"\x00\x01\x02\x10AAAABBBB\xfe\xff\x01"
    assert byte_at_a_time(ecb_oracle(rng, suffix=secret)) == secret


def test_recover_empty_secret(rng):
    assert byte_at_a_time(ecb_oracle(rng, suffix=b"")) == b""


def test_query_budget(rng):
    oracle = ecb_oracle(rng)
    byte_at_a_time(oracle)
    assert oracle.query_count <= 256 * len(ROLLIN) + 200


def test_candidate_dictionary_covers_every_byte(rng):
    attack = ByteAtATimeAttack(ecb_oracle(rng, prefix=b"p" * 9))
    alignment = attack.find_alignment(16)
    dictionary = attack.candidate_dictionary(b"Rollin", alignment)
    assert sorted(dictionary.values()) == list(range(256))
    assert dictionary[attack.target_block(b"Rollin", alignment)] == ord("'")


def test_next_byte_stops_at_end_of_secret(rng):
    attack = ByteAtATimeAttack(ecb_oracle(rng, prefix=b"p" * 3))
    alignment = attack.find_alignment(16)
    assert attack.next_byte(ROLLIN[:-1], alignment) == ord("0")
    assert attack.next_byte(ROLLIN, alignment) is None


def test_cbc_oracle_is_not_attackable(rng):
    with pytest.raises(AlignmentNotFoundError):
        byte_at_a_time(EncryptionOracle(rng, mode=Mode.CBC, suffix=ROLLIN))


def test_changing_secret_is_not_recoverable(rng):
    with pytest.raises(ByteNotRecoverableError) as excinfo:
        byte_at_a_time(ShiftingSuffixOracle(rng))
    assert 1 <= excinfo.value.position < 20
    assert len(excinfo.value.recovered) == excinfo.value.position


def test_ambiguous_block_is_not_recoverable():
    with pytest.raises(ByteNotRecoverableError, match="ambiguous") as excinfo:
        byte_at_a_time(LossyOracle())
    assert excinfo.value.position == 0


def test_fillers_must_differ():
    with pytest.raises(ValueError):
        ByteAtATimeAttack(ConstantLengthOracle(), filler=b"A", alt_filler=b"A")
