"""
Byte-level helpers used by the HMAC and PBKDF2 implementations.

This module provides XOR of equal-length buffers, big-endian integer
encoding for block counters, and hex formatting for caller-side output.
"""

import secrets
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def xor_bytes(a: BytesLike, b: BytesLike) -> bytes:
    """
    XOR two byte sequences of equal length.
    
    Args:
        a: First byte sequence
        b: Second byte sequence
        
    Returns:
        XOR result as bytes
        
    Raises:
        ValueError: If sequences have different lengths
    """
    if len(a) != len(b):
        raise ValueError("Byte sequences must have equal length")
    
    return bytes(x ^ y for x, y in zip(a, b))


def xor_with_byte(data: BytesLike, value: int) -> bytes:
    """
    XOR every byte of data with a single constant byte.
    
    The constant is expanded to the full length of data first, so the
    equal-length contract of xor_bytes is kept.
    """
    if not 0 <= value <= 0xFF:
        raise ValueError("XOR constant must be a single byte (0-255)")
    return xor_bytes(data, bytes([value]) * len(data))


def int_to_bytes(value: int, length: int) -> bytes:
    """
    Convert integer to bytes (big-endian).
    
    Args:
        value: Integer to convert
        length: Number of bytes in output
        
    Returns:
        Bytes representation
    """
    return value.to_bytes(length, byteorder='big')


def encode_block_counter(index: int) -> bytes:
    """Encode a 1-indexed PBKDF2 block counter as 4 bytes, big-endian."""
    if not 1 <= index <= 0xFFFFFFFF:
        raise ValueError("Block counter must be between 1 and 2**32 - 1")
    return int_to_bytes(index, 4)


def to_bytes(value: Union[str, BytesLike], name: str = "value") -> bytes:
    """
    Normalize a password, salt, key or message to bytes.
    
    Text is encoded as UTF-8; any other non-bytes type is rejected.
    """
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{name} must be bytes or str, not {type(value).__name__}")


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte sequences in constant time.
    
    Args:
        a: First byte sequence
        b: Second byte sequence
        
    Returns:
        True if sequences are equal, False otherwise
    """
    return secrets.compare_digest(a, b)


def format_hex(data: bytes, separator: str = "") -> str:
    """
    Format bytes as lowercase hexadecimal string.
    
    Args:
        data: Bytes to format
        separator: Separator between hex bytes
        
    Returns:
        Formatted hex string
    """
    return separator.join(f"{b:02x}" for b in data)


def parse_hex(hex_string: str) -> bytes:
    """
    Parse hexadecimal string to bytes.
    
    Args:
        hex_string: Hex string (with or without separators)
        
    Returns:
        Parsed bytes
    """
    # Remove common separators
    cleaned = hex_string.replace(" ", "").replace(":", "").replace("-", "")
    return bytes.fromhex(cleaned)
