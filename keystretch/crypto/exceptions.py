"""
Exception hierarchy for keystretch key derivation.

Every failure raised by the derivation core derives from KeyDerivationError,
so callers can catch one type at the API boundary.
"""


class KeyDerivationError(Exception):
    """Raised when key derivation fails."""
    pass


class UnsupportedAlgorithm(KeyDerivationError, ValueError):
    """Raised when a hash algorithm identifier is not recognized."""
    pass


class InvalidIterationCount(KeyDerivationError, ValueError):
    """Raised when the iteration count is not a positive integer."""
    pass


class InvalidKeyLength(KeyDerivationError, ValueError):
    """Raised when the requested derived key length is invalid."""
    pass


class HashProviderFailure(KeyDerivationError):
    """Raised when the underlying digest computation fails."""
    pass


class DerivationCancelled(KeyDerivationError):
    """Raised when a derivation is aborted by its cancellation check."""
    pass


class DerivationTimeout(DerivationCancelled):
    """Raised when a derivation exceeds its time budget."""
    pass
