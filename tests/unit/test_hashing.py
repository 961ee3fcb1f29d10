"""
Module 02 - Hashing Unit Tests
Tests for core/crypto/hashing.py
"""
import pytest

from core.crypto.hashing import (
    address_to_hex,
    from_hex,
    hash_pair,
    keccak256,
    parse_quantity,
    quantity_to_hex,
    to_address,
    to_digest,
    to_hex,
)


class TestKeccak:
    """Tests for the keccak-256 primitive."""

    def test_empty_input_known_digest(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_abc_known_digest(self):
        assert keccak256(b"abc").hex() == (
            "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"
        )

    def test_digest_is_32_bytes(self):
        assert len(keccak256(b"hello")) == 32

    def test_accepts_bytearray(self):
        assert keccak256(bytearray(b"abc")) == keccak256(b"abc")


class TestHashPair:
    """Tests for sorted-pair hashing."""

    def test_symmetric(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        assert hash_pair(a, b) == hash_pair(b, a)

    def test_orders_lexicographically(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        low, high = sorted([a, b])
        assert hash_pair(a, b) == keccak256(low + high)

    def test_self_pair(self):
        a = keccak256(b"a")
        assert hash_pair(a, a) == keccak256(a + a)


class TestHex:
    """Tests for hex helpers."""

    def test_to_hex(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_from_hex(self):
        assert from_hex("0xdeadbeef") == bytes.fromhex("deadbeef")

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")


class TestQuantities:
    """Tests for quantity rendering and parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [(0, "0x00"), (200, "0xc8"), (250, "0xfa"), (300, "0x012c"), (750, "0x02ee")],
    )
    def test_quantity_to_hex(self, value, expected):
        assert quantity_to_hex(value) == expected

    def test_quantity_to_hex_negative(self):
        with pytest.raises(ValueError):
            quantity_to_hex(-1)

    @pytest.mark.parametrize(
        "value,expected",
        [(750, 750), ("750", 750), ("0x02ee", 750), ("0X2EE", 750), (" 12 ", 12)],
    )
    def test_parse_quantity(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize("value", ["abc", "-1", "1.5", "0x", "", True, 1.0])
    def test_parse_quantity_rejects(self, value):
        with pytest.raises(ValueError):
            parse_quantity(value)


class TestNormalisation:
    """Tests for digest and address normalisation."""

    def test_to_digest_from_hex(self):
        digest = keccak256(b"x")
        assert to_digest(to_hex(digest)) == digest

    def test_to_digest_wrong_length(self):
        with pytest.raises(ValueError, match="32 bytes"):
            to_digest(b"\x00" * 31)

    def test_to_address_from_hex(self):
        address = to_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert address == bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")

    def test_to_address_ignores_case(self):
        lower = to_address("0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        mixed = to_address("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
        assert lower == mixed

    def test_to_address_bytes_passthrough(self):
        raw = bytes(range(20))
        assert to_address(raw) == raw

    def test_to_address_wrong_length_bytes(self):
        with pytest.raises(ValueError, match="20 bytes"):
            to_address(bytes(19))

    def test_to_address_invalid_string(self):
        with pytest.raises(ValueError):
            to_address("0x1234")

    def test_address_to_hex_checksums(self):
        raw = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert address_to_hex(raw) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
