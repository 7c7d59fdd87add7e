"""
Cryptographic primitives for keystretch.

This module provides:
- Pluggable hash providers (cryptography, hashlib)
- HMAC over any supported digest
- PBKDF2 key derivation
"""

from .algorithms import (
    HashAlgorithm,
    HashProvider,
    CryptographyHashProvider,
    HashlibHashProvider,
    get_default_provider,
    supported_algorithms,
)
from .exceptions import (
    KeyDerivationError,
    UnsupportedAlgorithm,
    InvalidIterationCount,
    InvalidKeyLength,
    HashProviderFailure,
    DerivationCancelled,
    DerivationTimeout,
)
from .mac import HmacKey, hmac, hmac_hex
from .pbkdf2 import pbkdf2, pbkdf2_hex, verify_derived_key
from .utils import xor_bytes, xor_with_byte

__all__ = [
    'HashAlgorithm',
    'HashProvider',
    'CryptographyHashProvider',
    'HashlibHashProvider',
    'get_default_provider',
    'supported_algorithms',
    'KeyDerivationError',
    'UnsupportedAlgorithm',
    'InvalidIterationCount',
    'InvalidKeyLength',
    'HashProviderFailure',
    'DerivationCancelled',
    'DerivationTimeout',
    'HmacKey',
    'hmac',
    'hmac_hex',
    'pbkdf2',
    'pbkdf2_hex',
    'verify_derived_key',
    'xor_bytes',
    'xor_with_byte',
]
