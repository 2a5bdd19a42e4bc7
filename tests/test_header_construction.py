"""
Test suite for transaction and batch header construction.

Header bytes are what the ledger verifies signatures against, so these
tests pin the exact protobuf layout.
"""

import hashlib

import pytest

from gitchain.errors import TransactionBuildError
from gitchain.tx import schema
from gitchain.tx.header import (
    FAMILY_NAME,
    FAMILY_VERSION,
    build_batch_header,
    build_transaction_header,
    payload_digest,
    transaction_addresses,
)


PUBLIC_KEY = "02" + "ab" * 32
EMPTY_SHA512 = (
    "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
    "47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e"
)


def _field(tag: int, value: bytes) -> bytes:
    """Length-delimited protobuf field with a one-byte length."""
    return bytes([tag, len(value)]) + value


# ============================================================================
# Payload Digest
# ============================================================================

class TestPayloadDigest:
    """Tests for the payload SHA-512 digest."""
    
    def test_empty_payload(self):
        assert payload_digest(b"") == EMPTY_SHA512
    
    @pytest.mark.parametrize("size", [1, 127, 128, 4096, 100_000])
    def test_matches_sha512(self, size):
        payload = bytes(range(256)) * (size // 256) + bytes(size % 256)
        
        assert payload_digest(payload) == hashlib.sha512(payload).hexdigest()
    
    def test_lowercase_hex(self):
        digest = payload_digest(b"payload")
        
        assert len(digest) == 128
        assert digest == digest.lower()
    
    def test_header_embeds_digest(self):
        payload = b"\xa1\x64type\x64push"
        header = schema.TransactionHeader()
        header.ParseFromString(build_transaction_header(payload, [], [], PUBLIC_KEY))
        
        assert header.payload_sha512 == hashlib.sha512(payload).hexdigest()


# ============================================================================
# Transaction Header
# ============================================================================

class TestTransactionHeader:
    """Tests for transaction header bytes."""
    
    def test_known_good_vector(self):
        """Header bytes match a hand-assembled protobuf encoding."""
        header = build_transaction_header(
            b"",
            ["in1", "in2"],
            ["out"],
            signer_public_key=PUBLIC_KEY,
        )
        
        expected = (
            _field(0x0A, PUBLIC_KEY.encode())          # 1: batcher_public_key
            + _field(0x1A, b"gitchain")                # 3: family_name
            + _field(0x22, b"0.1")                     # 4: family_version
            + _field(0x2A, b"in1")                     # 5: inputs
            + _field(0x2A, b"in2")
            + _field(0x3A, b"out")                     # 7: outputs
            + b"\x4a\x80\x01" + EMPTY_SHA512.encode()  # 9: payload_sha512 (128 bytes)
            + _field(0x52, PUBLIC_KEY.encode())        # 10: signer_public_key
        )
        
        assert header == expected
    
    def test_deterministic(self):
        """Identical inputs give identical bytes."""
        args = (b"payload", ["a", "b"], ["c"], PUBLIC_KEY)
        
        assert build_transaction_header(*args) == build_transaction_header(*args)
    
    def test_fields(self):
        """Decoded header carries every field."""
        header = schema.TransactionHeader()
        header.ParseFromString(build_transaction_header(b"x", ["a"], ["b", "c"], PUBLIC_KEY))
        
        assert header.family_name == FAMILY_NAME
        assert header.family_version == FAMILY_VERSION
        assert list(header.inputs) == ["a"]
        assert list(header.outputs) == ["b", "c"]
        assert header.signer_public_key == PUBLIC_KEY
        assert header.batcher_public_key == PUBLIC_KEY
        assert list(header.dependencies) == []
        assert header.nonce == ""
    
    def test_address_order_preserved(self):
        header = schema.TransactionHeader()
        header.ParseFromString(build_transaction_header(b"", ["z", "a", "m"], None, PUBLIC_KEY))
        
        assert list(header.inputs) == ["z", "a", "m"]
        assert list(header.outputs) == []
    
    def test_explicit_batcher_key(self):
        other = "03" + "cd" * 32
        header = schema.TransactionHeader()
        header.ParseFromString(
            build_transaction_header(b"", [], [], PUBLIC_KEY, batcher_public_key=other)
        )
        
        assert header.batcher_public_key == other
        assert header.signer_public_key == PUBLIC_KEY
    
    def test_nonce_changes_bytes(self):
        plain = build_transaction_header(b"", [], [], PUBLIC_KEY)
        with_nonce = build_transaction_header(b"", [], [], PUBLIC_KEY, nonce="1")
        
        assert plain != with_nonce


class TestTransactionAddresses:
    """Tests for reading declared addresses."""
    
    def test_declared(self, sample_transaction):
        inputs, outputs = transaction_addresses(sample_transaction)
        
        assert inputs == sample_transaction["meta"]["inputs"]
        assert outputs == sample_transaction["meta"]["outputs"]
    
    @pytest.mark.parametrize("transaction", [
        {"type": "push"},
        {"type": "push", "meta": None},
        {"type": "push", "meta": {}},
        {"type": "push", "meta": {"inputs": None}},
    ])
    def test_defaults_to_empty(self, transaction):
        assert transaction_addresses(transaction) == ([], [])


# ============================================================================
# Batch Header
# ============================================================================

class TestBatchHeader:
    """Tests for batch header bytes."""
    
    def test_known_good_vector(self):
        ids = ["1" * 128, "2" * 128]
        
        expected = (
            _field(0x0A, PUBLIC_KEY.encode())
            + b"\x12\x80\x01" + ids[0].encode()
            + b"\x12\x80\x01" + ids[1].encode()
        )
        
        assert build_batch_header(PUBLIC_KEY, ids) == expected
    
    @pytest.mark.parametrize("count", [1, 2, 5, 10])
    def test_transaction_id_order(self, count):
        """Transaction ids keep the order they were given in."""
        ids = [f"{i:0128x}" for i in reversed(range(count))]
        header = schema.BatchHeader()
        header.ParseFromString(build_batch_header(PUBLIC_KEY, ids))
        
        assert list(header.transaction_ids) == ids
        assert header.signer_public_key == PUBLIC_KEY
    
    def test_schema_defines_ledger_messages_only(self):
        messages = schema.BatchList.DESCRIPTOR.file.message_types_by_name
        
        assert set(messages) == {
            "TransactionHeader",
            "Transaction",
            "BatchHeader",
            "Batch",
            "BatchList",
        }


class TestTransactionAddressValidation:
    """Malformed address declarations are rejected before signing."""
    
    @pytest.mark.parametrize("transaction,match", [
        ({"type": "push", "meta": "not-a-mapping"}, "meta must be a mapping"),
        ({"type": "push", "meta": ["inputs"]}, "meta must be a mapping"),
        ({"type": "push", "meta": {"inputs": "abc"}}, "meta.inputs must be a list"),
        ({"type": "push", "meta": {"outputs": {"a": 1}}}, "meta.outputs must be a list"),
        ({"type": "push", "meta": {"inputs": [123]}}, "non-string address"),
        ({"type": "push", "meta": {"outputs": ["ok", None]}}, "non-string address"),
    ])
    def test_rejects_malformed_meta(self, transaction, match):
        with pytest.raises(TransactionBuildError, match=match):
            transaction_addresses(transaction)
    
    def test_tuple_addresses(self):
        assert transaction_addresses({"meta": {"inputs": ("a", "b")}}) == (["a", "b"], [])
