import pytest

from blockattack.errors import InvalidPaddingError
from blockattack.padding import pad, unpad


def test_pad_yellow_submarine_to_20():
    assert pad(b"YELLOW SUBMARINE", 20) == b"YELLOW SUBMARINE\x04\x04\x04\x04"


def test_aligned_input_gets_full_block():
    assert pad(b"YELLOW SUBMARINE", 16) == b"YELLOW SUBMARINE" + b"\x10" * 16
    assert pad(b"", 16) == b"\x10" * 16


@pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 31, 32, 33])
def test_pad_length_and_round_trip(length):
    data = bytes(range(length))
    padded = pad(data, 16)
    assert len(padded) % 16 == 0
    assert len(data) < len(padded) <= len(data) + 16
    assert unpad(padded, 16) == data


@pytest.mark.parametrize("padded", [
    b"",
    b"ICE ICE BABY\x00\x00\x00\x00",
    b"ICE ICE BABY\x05\x05\x05\x05",
    b"ICE ICE BABY\x01\x02\x03\x04",
    b"ICE ICE BABY\x04\x04\x04" + b"\x11",
    b"\x03\x03",
])
def test_unpad_rejects_bad_padding(padded):
    with pytest.raises(InvalidPaddingError):
        unpad(padded, 16)


def test_unpad_valid():
    assert unpad(b"ICE ICE BABY\x04\x04\x04\x04") == b"ICE ICE BABY"


def test_invalid_padding_is_a_value_error():
    with pytest.raises(ValueError):
        unpad(b"abc\x00")


@pytest.mark.parametrize("block_size", [0, 256])
def test_bad_block_size(block_size):
    with pytest.raises(ValueError):
        pad(b"data", block_size)
