"""
HMAC over a pluggable HashProvider (RFC 2104).

The key is normalized to exactly the algorithm's block size, masked with
the inner and outer pads, and the message is hashed twice:

    HMAC(K, m) = H((K' ^ opad) || H((K' ^ ipad) || m))
"""

from typing import Optional, Union

from .algorithms import AlgorithmLike, HashProvider, get_default_provider, resolve_algorithm
from .exceptions import HashProviderFailure, KeyDerivationError
from .utils import format_hex, to_bytes, xor_with_byte

IPAD_BYTE = 0x36
OPAD_BYTE = 0x5C


class HmacKey:
    """
    An HMAC key prepared for one algorithm.

    Holds the block-sized inner and outer padded keys so that many messages
    can be authenticated under the same key without repeating the key
    schedule. PBKDF2 reuses one HmacKey for every round.
    """

    def __init__(self, algorithm: AlgorithmLike, key: Union[bytes, str],
                 provider: Optional[HashProvider] = None):
        self.provider = provider or get_default_provider()
        self.algorithm = resolve_algorithm(algorithm, self.provider)
        self.block_size = self.provider.block_size(self.algorithm)
        self.digest_length = self.provider.digest_length(self.algorithm)

        padded = self._pad_key(to_bytes(key, "key"))
        self._ipad = xor_with_byte(padded, IPAD_BYTE)
        self._opad = xor_with_byte(padded, OPAD_BYTE)

    def _hash(self, data: bytes) -> bytes:
        try:
            return self.provider.digest(self.algorithm, data)
        except KeyDerivationError:
            raise
        except Exception as e:
            raise HashProviderFailure(f"{self.algorithm.value} digest failed: {e}") from e

    def _pad_key(self, key: bytes) -> bytes:
        """Reduce the key to at most one block, then zero-pad it to exactly one block."""
        if len(key) > self.block_size:
            key = self._hash(key)
        return key.ljust(self.block_size, b"\x00")

    def digest(self, message: bytes) -> bytes:
        """Return the HMAC of message under this key."""
        inner = self._hash(self._ipad + message)
        return self._hash(self._opad + inner)


def hmac(algorithm: AlgorithmLike, message: Union[bytes, str], key: Union[bytes, str],
         provider: Optional[HashProvider] = None) -> bytes:
    """
    Compute a keyed hash using the HMAC construction.

    Args:
        algorithm: HashAlgorithm member or name (e.g. "SHA256")
        message: Message to authenticate
        key: Secret key of any length
        provider: Digest provider, defaults to the cryptography-backed one

    Returns:
        The digest, exactly digest_length bytes long

    Raises:
        UnsupportedAlgorithm: If the algorithm is unknown, before any hashing
        HashProviderFailure: If the underlying digest fails
    """
    message = to_bytes(message, "message")
    return HmacKey(algorithm, key, provider).digest(message)


def hmac_hex(algorithm: AlgorithmLike, message: Union[bytes, str], key: Union[bytes, str],
             provider: Optional[HashProvider] = None) -> str:
    """Same as hmac() but returns lowercase hex."""
    return format_hex(hmac(algorithm, message, key, provider))


__all__ = ['HmacKey', 'hmac', 'hmac_hex', 'IPAD_BYTE', 'OPAD_BYTE']
