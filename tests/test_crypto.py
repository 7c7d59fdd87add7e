"""
Test suite for keystretch byte helpers and hash providers.
"""

import hashlib

import pytest

from keystretch.crypto.algorithms import (
    CryptographyHashProvider,
    HashAlgorithm,
    HashlibHashProvider,
    get_default_provider,
    resolve_algorithm,
    supported_algorithms,
)
from keystretch.crypto.exceptions import KeyDerivationError, UnsupportedAlgorithm
from keystretch.crypto.utils import (
    constant_time_compare,
    encode_block_counter,
    format_hex,
    parse_hex,
    to_bytes,
    xor_bytes,
    xor_with_byte,
)

EXPECTED_SIZES = {
    HashAlgorithm.MD5: (16, 64),
    HashAlgorithm.SHA1: (20, 64),
    HashAlgorithm.SHA224: (28, 64),
    HashAlgorithm.SHA256: (32, 64),
    HashAlgorithm.SHA384: (48, 128),
    HashAlgorithm.SHA512: (64, 128),
}


class TestByteXor:
    """Test XOR helpers."""
    
    def test_xor_equal_length(self):
        assert xor_bytes(b"\x0f\xf0\xaa", b"\xff\xff\x55") == b"\xf0\x0f\xff"
    
    def test_xor_is_self_inverse(self):
        a = bytes(range(32))
        b = bytes(reversed(range(32)))
        assert xor_bytes(xor_bytes(a, b), b) == a
        assert xor_bytes(a, a) == bytes(32)
    
    def test_xor_empty(self):
        assert xor_bytes(b"", b"") == b""
    
    def test_xor_length_mismatch_rejected(self):
        """Mismatched operands are an error, never padded."""
        with pytest.raises(ValueError):
            xor_bytes(b"abc", b"\x36")
    
    def test_xor_accepts_bytearray(self):
        assert xor_bytes(bytearray(b"\x01\x02"), memoryview(b"\x03\x04")) == b"\x02\x06"
    
    def test_xor_with_byte(self):
        """A single constant is expanded to the full length."""
        assert xor_with_byte(b"\x00\x00\x00", 0x36) == b"\x36\x36\x36"
        assert xor_with_byte(b"\x5c\x00", 0x5C) == b"\x00\x5c"
    
    def test_xor_with_byte_range(self):
        with pytest.raises(ValueError):
            xor_with_byte(b"abc", 256)
        with pytest.raises(ValueError):
            xor_with_byte(b"abc", -1)


class TestEncoding:
    """Test block counter and hex helpers."""
    
    def test_block_counter_big_endian(self):
        assert encode_block_counter(1) == b"\x00\x00\x00\x01"
        assert encode_block_counter(258) == b"\x00\x00\x01\x02"
        assert encode_block_counter(2 ** 32 - 1) == b"\xff\xff\xff\xff"
    
    def test_block_counter_is_one_indexed(self):
        with pytest.raises(ValueError):
            encode_block_counter(0)
        with pytest.raises(ValueError):
            encode_block_counter(2 ** 32)
    
    def test_format_and_parse_hex(self):
        assert format_hex(b"\x01\xab") == "01ab"
        assert format_hex(b"\x01\xab", ":") == "01:ab"
        assert parse_hex("01:ab") == b"\x01\xab"
        assert parse_hex("01 AB") == b"\x01\xab"
    
    def test_to_bytes(self):
        assert to_bytes("pässword") == "pässword".encode("utf-8")
        assert to_bytes(bytearray(b"salt")) == b"salt"
        with pytest.raises(TypeError):
            to_bytes(1234, "password")
    
    def test_constant_time_compare(self):
        assert constant_time_compare(b"abc", b"abc")
        assert not constant_time_compare(b"abc", b"abd")


class TestHashAlgorithm:
    """Test algorithm identifiers."""
    
    @pytest.mark.parametrize("name,expected", [
        ("SHA256", HashAlgorithm.SHA256),
        ("sha256", HashAlgorithm.SHA256),
        ("SHA-256", HashAlgorithm.SHA256),
        ("sha_512", HashAlgorithm.SHA512),
        (" md5 ", HashAlgorithm.MD5),
        ("Sha1", HashAlgorithm.SHA1),
    ])
    def test_from_name(self, name, expected):
        assert HashAlgorithm.from_name(name) is expected
    
    @pytest.mark.parametrize("name", ["SHA3-256", "whirlpool", "", "SHA 256"])
    def test_unknown_name(self, name):
        with pytest.raises(UnsupportedAlgorithm):
            HashAlgorithm.from_name(name)
    
    def test_unsupported_is_key_derivation_error(self):
        with pytest.raises(KeyDerivationError):
            HashAlgorithm.from_name("RIPEMD160")
        with pytest.raises(ValueError):
            HashAlgorithm.from_name("RIPEMD160")
    
    def test_non_string_rejected(self):
        with pytest.raises(UnsupportedAlgorithm):
            HashAlgorithm.from_name(256)


@pytest.fixture(params=[CryptographyHashProvider, HashlibHashProvider], ids=["cryptography", "hashlib"])
def provider(request):
    return request.param()


class TestHashProviders:
    """Test the digest adapters."""
    
    @pytest.mark.parametrize("algorithm", list(HashAlgorithm))
    def test_sizes(self, provider, algorithm):
        digest_length, block_size = EXPECTED_SIZES[algorithm]
        assert provider.digest_length(algorithm) == digest_length
        assert provider.block_size(algorithm) == block_size
    
    @pytest.mark.parametrize("algorithm", list(HashAlgorithm))
    def test_digest_matches_hashlib(self, provider, algorithm):
        data = b"The quick brown fox jumps over the lazy dog"
        expected = hashlib.new(algorithm.value.lower(), data).digest()
        assert provider.digest(algorithm, data) == expected
    
    def test_known_digest(self, provider):
        assert provider.digest(HashAlgorithm.SHA256, b"").hex() == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )
    
    def test_default_provider_is_cryptography(self):
        assert isinstance(get_default_provider(), CryptographyHashProvider)
        assert get_default_provider() is get_default_provider()
    
    def test_supported_algorithms(self):
        assert supported_algorithms() == list(HashAlgorithm)
    
    def test_resolve_algorithm_checks_provider(self):
        class Sha256Only(CryptographyHashProvider):
            def supports(self, algorithm):
                return algorithm is HashAlgorithm.SHA256
        
        restricted = Sha256Only()
        assert resolve_algorithm("sha256", restricted) is HashAlgorithm.SHA256
        with pytest.raises(UnsupportedAlgorithm):
            resolve_algorithm(HashAlgorithm.MD5, restricted)
        assert supported_algorithms(restricted) == [HashAlgorithm.SHA256]
