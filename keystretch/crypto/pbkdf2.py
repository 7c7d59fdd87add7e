"""
PBKDF2 key derivation (RFC 2898, PKCS #5 v2.0).

Each output block T_i is the XOR of an HMAC chain:

    U_1 = PRF(P, S || INT_32_BE(i))
    U_j = PRF(P, U_{j-1})
    T_i = U_1 ^ U_2 ^ ... ^ U_c

and the derived key is T_1 || T_2 || ... truncated to dkLen bytes.
Blocks are independent and may be computed in parallel; the chain inside
a block is strictly sequential.
"""

import logging
import math
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Union

from .algorithms import AlgorithmLike, HashProvider, get_default_provider, resolve_algorithm
from .exceptions import DerivationCancelled, DerivationTimeout, InvalidIterationCount, InvalidKeyLength
from .mac import HmacKey
from .utils import constant_time_compare, encode_block_counter, format_hex, to_bytes, xor_bytes

logger = logging.getLogger(__name__)

MAX_UINT32 = 2 ** 32 - 1
DEFAULT_CHECK_INTERVAL = 1024
LOW_ITERATION_THRESHOLD = 1000


class _CancellationGuard:
    """Polled from inside HMAC chains; raises when the derivation must stop."""

    def __init__(self, cancel_check: Optional[Callable[[], bool]], timeout: Optional[float]):
        self.cancel_check = cancel_check
        self.timeout = timeout
        self.deadline = None if timeout is None else time.monotonic() + timeout
        self._aborted = threading.Event()

    def abort(self) -> None:
        self._aborted.set()

    def check(self) -> None:
        if self._aborted.is_set():
            raise DerivationCancelled("Derivation aborted")
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise DerivationTimeout(f"Derivation exceeded timeout of {self.timeout}s")
        if self.cancel_check is not None and self.cancel_check():
            raise DerivationCancelled("Derivation cancelled by caller")


def _validate_iterations(iterations: int) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidIterationCount(f"Iteration count must be an integer, got {iterations!r}")
    if iterations < 1:
        raise InvalidIterationCount(f"Iteration count must be at least 1, got {iterations}")
    if iterations > MAX_UINT32:
        raise InvalidIterationCount(f"Iteration count must not exceed {MAX_UINT32}")


def _validate_key_length(key_length: int, digest_length: int) -> int:
    """Return the effective key length, mapping 0 to the digest length."""
    if isinstance(key_length, bool) or not isinstance(key_length, int):
        raise InvalidKeyLength(f"Key length must be an integer, got {key_length!r}")
    if key_length < 0:
        raise InvalidKeyLength(f"Key length must not be negative, got {key_length}")
    if key_length == 0:
        return digest_length
    if key_length > MAX_UINT32 * digest_length:
        raise InvalidKeyLength(f"Key length must not exceed {MAX_UINT32 * digest_length} bytes")
    return key_length


def _derive_block(prf: HmacKey, salt: bytes, index: int, iterations: int,
                  guard: _CancellationGuard, check_interval: int) -> bytes:
    """Compute output block T_index."""
    guard.check()
    u = prf.digest(salt + encode_block_counter(index))
    accumulator = u
    for j in range(2, iterations + 1):
        if j % check_interval == 0:
            guard.check()
        u = prf.digest(u)
        accumulator = xor_bytes(accumulator, u)
    return accumulator


def _derive_blocks_parallel(prf: HmacKey, salt: bytes, block_count: int, iterations: int,
                            guard: _CancellationGuard, check_interval: int,
                            max_workers: int) -> List[bytes]:
    workers = min(max_workers, block_count)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pbkdf2") as executor:
        futures = [
            executor.submit(_derive_block, prf, salt, index, iterations, guard, check_interval)
            for index in range(1, block_count + 1)
        ]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                # Stop the remaining chains at their next check
                guard.abort()
                for pending in futures:
                    pending.cancel()
                raise future.exception()
        return [future.result() for future in futures]


def pbkdf2(algorithm: AlgorithmLike, password: Union[bytes, str], salt: Union[bytes, str],
           iterations: int, key_length: int = 0, provider: Optional[HashProvider] = None,
           cancel_check: Optional[Callable[[], bool]] = None, timeout: Optional[float] = None,
           check_interval: int = DEFAULT_CHECK_INTERVAL, max_workers: int = 1) -> bytes:
    """
    Derive a key from a password and salt with PBKDF2-HMAC.

    Args:
        algorithm: HashAlgorithm member or name (e.g. "SHA256")
        password: The password
        salt: A salt unique to the password
        iterations: HMAC rounds per output block, at least 1
        key_length: Derived key length in bytes; 0 means the digest length
        provider: Digest provider, defaults to the cryptography-backed one
        cancel_check: Callable polled during long chains; returning True aborts
        timeout: Wall-clock budget in seconds
        check_interval: Rounds between cancellation and timeout checks
        max_workers: Threads used to compute independent blocks

    Returns:
        Exactly key_length bytes (or the digest length when key_length is 0)

    Raises:
        UnsupportedAlgorithm: If the algorithm is unknown
        InvalidIterationCount: If iterations is not an integer in [1, 2**32 - 1]
        InvalidKeyLength: If key_length is negative or too large
        HashProviderFailure: If the underlying digest fails
        DerivationCancelled: If cancel_check requested an abort
        DerivationTimeout: If the timeout elapsed
    """
    _validate_iterations(iterations)
    if check_interval < 1:
        raise ValueError("check_interval must be at least 1")
    if max_workers < 1:
        raise ValueError("max_workers must be at least 1")
    password = to_bytes(password, "password")
    salt = to_bytes(salt, "salt")

    provider = provider or get_default_provider()
    algorithm = resolve_algorithm(algorithm, provider)
    digest_length = provider.digest_length(algorithm)
    key_length = _validate_key_length(key_length, digest_length)
    block_count = math.ceil(key_length / digest_length)

    prf = HmacKey(algorithm, password, provider)

    if iterations < LOW_ITERATION_THRESHOLD:
        logger.debug(f"Low PBKDF2 iteration count: {iterations}")
    logger.debug(
        f"PBKDF2-{prf.algorithm.value}: {iterations} iterations, "
        f"{block_count} block(s), {key_length} byte key"
    )

    guard = _CancellationGuard(cancel_check, timeout)
    started = time.perf_counter()
    try:
        if max_workers > 1 and block_count > 1:
            blocks = _derive_blocks_parallel(prf, salt, block_count, iterations,
                                             guard, check_interval, max_workers)
        else:
            blocks = [
                _derive_block(prf, salt, index, iterations, guard, check_interval)
                for index in range(1, block_count + 1)
            ]
    except DerivationCancelled as e:
        logger.warning(f"PBKDF2-{prf.algorithm.value} derivation aborted: {e}")
        raise

    logger.debug(f"PBKDF2-{prf.algorithm.value} finished in {time.perf_counter() - started:.4f}s")
    return b"".join(blocks)[:key_length]


def pbkdf2_hex(algorithm: AlgorithmLike, password: Union[bytes, str], salt: Union[bytes, str],
               iterations: int, key_length: int = 0, **kwargs) -> str:
    """Same as pbkdf2() but returns the derived key as lowercase hex."""
    return format_hex(pbkdf2(algorithm, password, salt, iterations, key_length, **kwargs))


def verify_derived_key(algorithm: AlgorithmLike, password: Union[bytes, str], salt: Union[bytes, str],
                       iterations: int, expected: bytes, **kwargs) -> bool:
    """
    Re-derive a key and compare it with expected in constant time.

    The derived length is taken from expected.
    """
    if not expected:
        raise InvalidKeyLength("Expected key must not be empty")
    derived = pbkdf2(algorithm, password, salt, iterations, len(expected), **kwargs)
    return constant_time_compare(derived, bytes(expected))
