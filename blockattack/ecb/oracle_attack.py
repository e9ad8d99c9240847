#!/usr/bin/env python3
"""
ECB Oracle Attack - Byte-at-a-time recovery of the oracle's hidden suffix

Target: query(data) = AES-ECB(K, random-prefix || data || secret)

Principle:
  1. Block size: grow the input one byte at a time; the first jump in the
     ciphertext length is the block size.
  2. Prefix length: grow a run of filler bytes until two identical ciphertext
     blocks appear. The run length at that point tells how many filler bytes
     complete the prefix's last block, so our input can start on a boundary.
  3. Secret length: after the alignment bytes, add bytes until the padding
     rolls over into a new block.
  4. Byte by byte: send just enough filler that the next unknown byte is the
     last byte of a block, then compare that block with the 256 blocks
     obtained by sending filler || recovered || candidate.

Usage:
  python3 -m blockattack.ecb.oracle_attack                   # local oracle
  python3 -m blockattack.ecb.oracle_attack --remote http://127.0.0.1:1337
"""

import base64
import logging
from dataclasses import dataclass
from multiprocessing.pool import ThreadPool
from typing import Dict, Iterator, Optional, Tuple

import requests
from tqdm.auto import tqdm

from blockattack.config import ALT_FILLER, FILLER, HOST, MAX_BLOCK_SIZE, PORT
from blockattack.ecb.detect import detect_mode, looks_like_ecb
from blockattack.errors import (AlignmentNotFoundError, BlockSizeNotFoundError,
                                ByteNotRecoverableError, RecoveryError)
from blockattack.oracle import Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alignment:
    block_size: int
    prefix_length: int
    pad_length: int       # filler bytes that complete the prefix's last block
    offset_blocks: int    # index of the first block fully under our control

    @classmethod
    def from_prefix(cls, block_size: int, prefix_length: int) -> "Alignment":
        pad_length = (block_size - prefix_length % block_size) % block_size
        return cls(block_size, prefix_length, pad_length, (prefix_length + pad_length) // block_size)

    @property
    def aligned_length(self) -> int:
        return self.prefix_length + self.pad_length


def _block_at(ciphertext: bytes, index: int, block_size: int) -> bytes:
    return ciphertext[index * block_size:(index + 1) * block_size]


class ByteAtATimeAttack:
    def __init__(self, oracle, *, filler: bytes = FILLER, alt_filler: bytes = ALT_FILLER,
                 workers: int = 1, progress: bool = False):
        if len(filler) != 1 or len(alt_filler) != 1 or filler == alt_filler:
            raise ValueError("filler and alt_filler must be two different single bytes")
        self.oracle = oracle
        self.filler = filler
        self.alt_filler = alt_filler
        self.workers = workers
        self.progress = progress

        # filled in by recover()
        self.block_size = None
        self.alignment = None
        self.secret_length = None
        # target ciphertexts only depend on the filler length
        self._targets: Dict[Tuple[Alignment, int], bytes] = {}
        self._lengths: Dict[Alignment, int] = {}

    # Phase 1
    def guess_block_size(self, max_block_size: int = MAX_BLOCK_SIZE) -> int:
        initial_length = len(self.oracle.query(b""))
        for i in range(1, max_block_size + 1):
            new_length = len(self.oracle.query(self.filler * i))
            if new_length > initial_length:
                logger.info("block size: %d bytes", new_length - initial_length)
                return new_length - initial_length
        raise BlockSizeNotFoundError(f"ciphertext length did not grow within {max_block_size} bytes")

    # Phase 2
    def find_alignment(self, block_size: int) -> Alignment:
        """
        Locate the hidden prefix.

        With n filler bytes, blocks i and i+1 are both pure filler for the
        first time when n = pad_length + 2 * block_size, and then the filler
        ends exactly at the end of block i+1, so prefix = (i + 2) * B - n.
        The same run is repeated with alt_filler: a pair counts only if it
        repeats in both runs and changes with the filler. Repeats in the
        prefix or suffix content, or a prefix that happens to end in filler
        bytes, fail that test.
        """
        for n in range(3 * block_size):
            first = self.oracle.query(self.filler * n)
            if not looks_like_ecb(first, block_size):
                continue
            second = self.oracle.query(self.alt_filler * n)

            for i in range(min(len(first), len(second)) // block_size - 1):
                a0, a1 = _block_at(first, i, block_size), _block_at(first, i + 1, block_size)
                b0, b1 = _block_at(second, i, block_size), _block_at(second, i + 1, block_size)
                if a0 == a1 and b0 == b1 and a0 != b0:
                    alignment = Alignment.from_prefix(block_size, (i + 2) * block_size - n)
                    logger.info("prefix: %d bytes, %d alignment bytes, controlled input starts at block %d",
                                alignment.prefix_length, alignment.pad_length, alignment.offset_blocks)
                    return alignment

        raise AlignmentNotFoundError(f"no filler-made block repeat within {3 * block_size} filler bytes")

    def suffix_length(self, alignment: Alignment) -> int:
        base = self.filler * alignment.pad_length
        initial_length = len(self.oracle.query(base))
        for j in range(1, alignment.block_size + 1):
            if len(self.oracle.query(base + self.filler * j)) > initial_length:
                return initial_length - alignment.aligned_length - j
        raise RecoveryError(f"ciphertext length did not grow within {alignment.block_size} bytes")

    def _known_length(self, alignment: Alignment) -> int:
        if alignment not in self._lengths:
            self._lengths[alignment] = self.suffix_length(alignment)
        return self._lengths[alignment]

    # Phase 3
    def _probe_input(self, recovered: bytes, alignment: Alignment) -> bytes:
        fill_length = alignment.block_size - 1 - len(recovered) % alignment.block_size
        return self.filler * (alignment.pad_length + fill_length)

    def _target_index(self, recovered: bytes, alignment: Alignment) -> int:
        return alignment.offset_blocks + len(recovered) // alignment.block_size

    def target_block(self, recovered: bytes, alignment: Alignment) -> bytes:
        probe = self._probe_input(recovered, alignment)
        key = (alignment, len(probe))
        if key not in self._targets:
            self._targets[key] = self.oracle.query(probe)
        return _block_at(self._targets[key], self._target_index(recovered, alignment), alignment.block_size)

    def candidate_blocks(self, recovered: bytes, alignment: Alignment) -> Iterator[Tuple[int, bytes]]:
        """Yield (candidate byte, resulting block) for all 256 candidates."""
        known = self._probe_input(recovered, alignment) + bytes(recovered)
        index = self._target_index(recovered, alignment)

        def probe(candidate):
            ciphertext = self.oracle.query(known + bytes([candidate]))
            return candidate, _block_at(ciphertext, index, alignment.block_size)

        if self.workers > 1:
            with ThreadPool(self.workers) as pool:
                yield from pool.imap(probe, range(256))
        else:
            yield from map(probe, range(256))

    def candidate_dictionary(self, recovered: bytes, alignment: Alignment) -> Dict[bytes, Optional[int]]:
        """Map each trial block to its candidate byte; blocks reached twice map to None."""
        dictionary = {}
        for candidate, block in self.candidate_blocks(recovered, alignment):
            dictionary[block] = None if block in dictionary else candidate
        return dictionary

    def next_byte(self, recovered: bytes, alignment: Alignment) -> Optional[int]:
        """Recover the byte after `recovered`; None once the secret is complete."""
        k = len(recovered)
        # past the end the target block holds padding, which would still match
        if k >= self._known_length(alignment):
            return None

        target = self.target_block(recovered, alignment)
        dictionary = self.candidate_dictionary(recovered, alignment)
        if target in dictionary:
            if dictionary[target] is None:
                raise ByteNotRecoverableError(k, recovered, "ambiguous dictionary block")
            return dictionary[target]

        # a miss is only fine if a fresh measurement puts us at the end of the secret
        if k >= self.suffix_length(alignment):
            return None
        raise ByteNotRecoverableError(k, recovered)

    def recover(self) -> bytes:
        self._targets.clear()
        self._lengths.clear()
        self.block_size = self.guess_block_size()
        if detect_mode(self.oracle, self.block_size) is not Mode.ECB:
            raise AlignmentNotFoundError("no repeated blocks: the oracle does not look like ECB")
        self.alignment = self.find_alignment(self.block_size)
        self.secret_length = self._known_length(self.alignment)
        logger.info("secret length: %d bytes", self.secret_length)

        recovered = bytearray()
        with tqdm(total=self.secret_length, disable=not self.progress, unit="B", desc="recovering") as bar:
            while len(recovered) < self.secret_length:
                byte = self.next_byte(recovered, self.alignment)
                if byte is None:
                    break
                recovered.append(byte)
                bar.update(1)
                logger.debug("byte %d: %#04x", len(recovered) - 1, byte)
        return bytes(recovered)


def byte_at_a_time(oracle, **kwargs) -> bytes:
    return ByteAtATimeAttack(oracle, **kwargs).recover()


class RemoteOracle:
    """Oracle served by blockattack.ecb.oracle_server."""

    def __init__(self, base_url: str = f"http://{HOST}:{PORT}", session=None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def query(self, data: bytes) -> bytes:
        response = self.session.post(
            f"{self.base_url}/api/encrypt",
            json={"data": base64.b64encode(data).decode()},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return base64.b64decode(response.json()["ciphertext"])


SECRET = base64.b64decode(
    "Um9sbGluJyBpbiBteSA1LjAKV2l0aCBteSByYWctdG9wIGRvd24gc28gbXkgaGFpciBjYW4gYmxvdwpUaGUgZ2lybGllcyBv"
    "biBzdGFuZGJ5IHdhdmluZyBqdXN0IHRvIHNheSBoaQpEaWQgeW91IHN0b3A/IE5vLCBJIGp1c3QgZHJvdmUgYnkK"
)


def main():
    import argparse

    from blockattack.config import configure_logging
    from blockattack.oracle import EncryptionOracle

    parser = argparse.ArgumentParser(description="Byte-at-a-time ECB decryption.")
    parser.add_argument("--remote", help="base URL of a running oracle_server (default: local oracle)")
    parser.add_argument("-w", "--workers", type=int, default=1, help="threads for dictionary queries")
    args = parser.parse_args()

    configure_logging()
    if args.remote:
        oracle = RemoteOracle(args.remote)
    else:
        oracle = EncryptionOracle(mode=Mode.ECB, suffix=SECRET)

    print("[*] Starting ECB Oracle Attack...")
    try:
        secret = byte_at_a_time(oracle, workers=args.workers, progress=True)
    except RecoveryError as e:
        print(f"[-] Attack failed: {e}")
        return 1
    print(f"\n[+] Recovered secret ({len(secret)} bytes):\n{secret.decode(errors='replace')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
