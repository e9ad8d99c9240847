"""
Exceptions raised by the block modes, the oracles and the attack.

Data-validation errors subclass ValueError, so callers that already catch
ValueError around pycryptodome's unpad() keep working.
"""


class BlockAttackError(Exception):
    """Base class for every error raised by blockattack."""


# Data validation
class InvalidPaddingError(BlockAttackError, ValueError):
    pass


class InvalidKeyLengthError(BlockAttackError, ValueError):
    pass


class InvalidIVLengthError(BlockAttackError, ValueError):
    pass


class InvalidBlockLengthError(BlockAttackError, ValueError):
    pass


class TruncatedCiphertextError(BlockAttackError, ValueError):
    pass


class ProfileError(BlockAttackError, ValueError):
    """Encrypted profile token did not decode to k=v pairs."""


# Attack failures: the oracle does not behave as the attack assumes
class RecoveryError(BlockAttackError):
    pass


class BlockSizeNotFoundError(RecoveryError):
    pass


class AlignmentNotFoundError(RecoveryError):
    """No filler run produced two identical blocks (non-ECB oracle?)."""


class ByteNotRecoverableError(RecoveryError):
    def __init__(self, position, recovered, reason="no candidate matched"):
        self.position = position
        self.recovered = bytes(recovered)
        super().__init__(f"byte {position} not recoverable: {reason} (recovered so far: {self.recovered!r})")
