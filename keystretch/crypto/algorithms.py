"""
Hash algorithm selection and digest providers.

HMAC and PBKDF2 never hash directly. They ask a HashProvider for a digest,
a block size and a digest length, so the primitive is pluggable:

- CryptographyHashProvider (default) uses cryptography's hash primitives
- HashlibHashProvider uses the standard library's hashlib
"""

import hashlib
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Type, Union

from cryptography.hazmat.primitives import hashes

from .exceptions import HashProviderFailure, UnsupportedAlgorithm


class HashAlgorithm(Enum):
    """Supported digest algorithms."""
    MD5 = "MD5"
    SHA1 = "SHA1"
    SHA224 = "SHA224"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        """
        Parse an algorithm identifier such as "SHA256", "sha-256" or "sha256".

        Raises:
            UnsupportedAlgorithm: If the name matches no supported variant
        """
        if not isinstance(name, str):
            raise UnsupportedAlgorithm(f"Unsupported hash algorithm: {name!r}")
        normalized = name.strip().upper().replace("-", "").replace("_", "")
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedAlgorithm(f"Unsupported hash algorithm: {name!r}") from None


AlgorithmLike = Union[HashAlgorithm, str]


class HashProvider(ABC):
    """Digest capability consumed by HMAC and PBKDF2."""

    @abstractmethod
    def supports(self, algorithm: HashAlgorithm) -> bool:
        """Return True if this provider can compute the given algorithm."""

    @abstractmethod
    def digest(self, algorithm: HashAlgorithm, data: bytes) -> bytes:
        """Return the digest of data."""

    @abstractmethod
    def block_size(self, algorithm: HashAlgorithm) -> int:
        """Return the algorithm's internal block size in bytes."""

    @abstractmethod
    def digest_length(self, algorithm: HashAlgorithm) -> int:
        """Return the algorithm's output length in bytes."""


class CryptographyHashProvider(HashProvider):
    """HashProvider backed by cryptography.hazmat.primitives.hashes."""

    _ALGORITHMS: Dict[HashAlgorithm, Type[hashes.HashAlgorithm]] = {
        HashAlgorithm.MD5: hashes.MD5,
        HashAlgorithm.SHA1: hashes.SHA1,
        HashAlgorithm.SHA224: hashes.SHA224,
        HashAlgorithm.SHA256: hashes.SHA256,
        HashAlgorithm.SHA384: hashes.SHA384,
        HashAlgorithm.SHA512: hashes.SHA512,
    }

    def _primitive(self, algorithm: HashAlgorithm) -> hashes.HashAlgorithm:
        try:
            return self._ALGORITHMS[algorithm]()
        except KeyError:
            raise UnsupportedAlgorithm(f"Unsupported hash algorithm: {algorithm!r}") from None

    def supports(self, algorithm: HashAlgorithm) -> bool:
        return algorithm in self._ALGORITHMS

    def digest(self, algorithm: HashAlgorithm, data: bytes) -> bytes:
        h = hashes.Hash(self._primitive(algorithm))
        h.update(data)
        return h.finalize()

    def block_size(self, algorithm: HashAlgorithm) -> int:
        return self._primitive(algorithm).block_size

    def digest_length(self, algorithm: HashAlgorithm) -> int:
        return self._primitive(algorithm).digest_size


class HashlibHashProvider(HashProvider):
    """HashProvider backed by the standard library's hashlib."""

    _NAMES: Dict[HashAlgorithm, str] = {
        HashAlgorithm.MD5: "md5",
        HashAlgorithm.SHA1: "sha1",
        HashAlgorithm.SHA224: "sha224",
        HashAlgorithm.SHA256: "sha256",
        HashAlgorithm.SHA384: "sha384",
        HashAlgorithm.SHA512: "sha512",
    }

    def _new(self, algorithm: HashAlgorithm):
        try:
            name = self._NAMES[algorithm]
        except KeyError:
            raise UnsupportedAlgorithm(f"Unsupported hash algorithm: {algorithm!r}") from None
        try:
            return hashlib.new(name)
        except ValueError as e:
            # e.g. MD5 disabled on FIPS builds
            raise HashProviderFailure(f"hashlib cannot provide {name}: {e}") from e

    def supports(self, algorithm: HashAlgorithm) -> bool:
        return algorithm in self._NAMES and self._NAMES[algorithm] in hashlib.algorithms_available

    def digest(self, algorithm: HashAlgorithm, data: bytes) -> bytes:
        h = self._new(algorithm)
        h.update(data)
        return h.digest()

    def block_size(self, algorithm: HashAlgorithm) -> int:
        return self._new(algorithm).block_size

    def digest_length(self, algorithm: HashAlgorithm) -> int:
        return self._new(algorithm).digest_size


_DEFAULT_PROVIDER = CryptographyHashProvider()


def get_default_provider() -> HashProvider:
    """Return the shared default provider (stateless, safe to share)."""
    return _DEFAULT_PROVIDER


def resolve_algorithm(algorithm: AlgorithmLike, provider: HashProvider) -> HashAlgorithm:
    """
    Validate an algorithm identifier against a provider.

    Args:
        algorithm: HashAlgorithm member or its name
        provider: Provider that will compute the digests

    Returns:
        The resolved HashAlgorithm

    Raises:
        UnsupportedAlgorithm: If the identifier is unknown or the provider
            cannot compute it
    """
    if not isinstance(algorithm, HashAlgorithm):
        algorithm = HashAlgorithm.from_name(algorithm)
    if not provider.supports(algorithm):
        raise UnsupportedAlgorithm(
            f"Hash algorithm {algorithm.value} is not supported by {type(provider).__name__}"
        )
    return algorithm


def supported_algorithms(provider: HashProvider = None) -> List[HashAlgorithm]:
    """List the algorithms the provider can compute, in declaration order."""
    provider = provider or get_default_provider()
    return [algorithm for algorithm in HashAlgorithm if provider.supports(algorithm)]
