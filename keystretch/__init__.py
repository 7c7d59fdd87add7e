"""
keystretch: PBKDF2 and HMAC over pluggable hash providers.

Derives keys from passwords following RFC 2898 (PKCS #5 v2.0), using HMAC
(RFC 2104) over MD5, SHA-1 or the SHA-2 family.

Basic Usage:
    >>> from keystretch import pbkdf2
    >>> key = pbkdf2("SHA256", b"password", b"salt", 4096, 32)
    >>> key.hex()
    'c5e478d59288c841aa530db6845c4c8d962893a001ce4e11a4963873aa98134a'
"""

__version__ = "1.0.0"
__author__ = "keystretch developers"

from .crypto import (
    HashAlgorithm,
    HashProvider,
    CryptographyHashProvider,
    HashlibHashProvider,
    get_default_provider,
    supported_algorithms,
    KeyDerivationError,
    UnsupportedAlgorithm,
    InvalidIterationCount,
    InvalidKeyLength,
    HashProviderFailure,
    DerivationCancelled,
    DerivationTimeout,
    HmacKey,
    hmac,
    hmac_hex,
    pbkdf2,
    pbkdf2_hex,
    verify_derived_key,
)
from .config import KeystretchConfig, DerivationSettings, ConfigError

__all__ = [
    '__version__',
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
    'KeystretchConfig',
    'DerivationSettings',
    'ConfigError',
]
