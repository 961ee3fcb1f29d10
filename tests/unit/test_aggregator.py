"""
Module 04 - Aggregator Unit Tests
Tests for distribution/aggregator.py and distribution/record.py
"""
import pytest

from core.config.runtime import AggregationConfig
from core.crypto.hashing import address_to_hex, to_hex
from core.merkle.balance_tree import BalanceTree
from core.schemas.entries import UINT256_MAX, Entry
from core.schemas.errors import (
    AmountOverflowException,
    DuplicateClaimError,
    DuplicateClaimException,
    EmptyInputException,
    InvalidAmountError,
    InvalidAmountException,
    LeafNotFoundException,
)
from distribution.aggregator import aggregate, collect_entries
from distribution.record import DistributionRecord
from fixtures.common import make_address, make_entries


@pytest.fixture
def sample_entries(alice, bob, carol, token):
    return make_entries(token, [(alice, 200), (bob, 300), (carol, 250)])


class TestAggregate:
    """Tests for building a distribution record."""

    def test_token_total(self, sample_entries, token):
        record = aggregate(sample_entries)
        assert record.tokens[token].token_total == 750

    def test_every_claim_present(self, sample_entries, alice, bob, carol, token):
        record = aggregate(sample_entries)
        claims = record.tokens[token].claims

        assert set(claims) == {alice, bob, carol}
        assert claims[alice].amount == 200
        assert claims[bob].amount == 300
        assert claims[carol].amount == 250
        assert record.claim_count == 3

    def test_root_matches_balance_tree(self, sample_entries):
        record = aggregate(sample_entries)
        assert record.merkle_root == BalanceTree(sample_entries).root

    def test_every_proof_verifies(self, sample_entries):
        record = aggregate(sample_entries)
        assert record.verify_all()

        for token, distribution in record.tokens.items():
            for account, claim in distribution.claims.items():
                assert BalanceTree.verify_proof(
                    account, token, claim.amount, claim.proof, record.merkle_root
                )

    def test_accepts_dict_entries(self, alice, token):
        record = aggregate([{"token": to_hex(token), "account": to_hex(alice), "amount": "10"}])
        assert record.claim_for(alice, token).amount == 10

    def test_empty_input(self):
        with pytest.raises(EmptyInputException):
            aggregate([])

    def test_deterministic(self, sample_entries):
        assert aggregate(sample_entries).merkle_root == aggregate(sample_entries).merkle_root


class TestMultipleTokens:
    """One root commits to every token in the batch."""

    def test_single_root_for_all_tokens(self, alice, bob, token, other_token):
        entries = make_entries(token, [(alice, 100), (bob, 50)]) + make_entries(
            other_token, [(alice, 7)]
        )
        record = aggregate(entries)

        assert set(record.tokens) == {token, other_token}
        assert record.tokens[token].token_total == 150
        assert record.tokens[other_token].token_total == 7
        assert record.verify_all()

    def test_same_account_two_tokens_is_not_duplicate(self, alice, token, other_token):
        entries = [
            Entry(token=token, account=alice, amount=1),
            Entry(token=other_token, account=alice, amount=2),
        ]
        record = aggregate(entries)
        assert record.claim_for(alice, token).amount == 1
        assert record.claim_for(alice, other_token).amount == 2

    def test_proof_does_not_transfer_across_tokens(self, alice, token, other_token):
        entries = [
            Entry(token=token, account=alice, amount=5),
            Entry(token=other_token, account=alice, amount=5),
        ]
        record = aggregate(entries)
        proof = record.claim_for(alice, token).proof
        # Same amount, but the leaf differs because the token is hashed in
        assert not BalanceTree.verify_proof(alice, other_token, 5, proof, record.merkle_root)


class TestAmountValidation:
    """Tests for amount bounds."""

    def test_zero_amount_rejected(self, alice, token):
        with pytest.raises(InvalidAmountException) as exc_info:
            aggregate([Entry(token=token, account=alice, amount=0)])
        assert exc_info.value.details["amount"] == "0"

    def test_negative_amount_rejected(self, alice, token):
        with pytest.raises(InvalidAmountError):
            aggregate([Entry(token=token, account=alice, amount=-5)])

    def test_amount_above_uint256_rejected(self, alice, token):
        with pytest.raises(InvalidAmountException):
            aggregate([Entry(token=token, account=alice, amount=UINT256_MAX + 1)])

    def test_max_amount_accepted(self, alice, token):
        record = aggregate([Entry(token=token, account=alice, amount=UINT256_MAX)])
        assert record.tokens[token].token_total == UINT256_MAX

    def test_total_overflow(self, alice, bob, token):
        entries = make_entries(token, [(alice, UINT256_MAX), (bob, 1)])
        with pytest.raises(AmountOverflowException):
            aggregate(entries)

    def test_overflow_is_overflow_error(self, alice, bob, token):
        entries = make_entries(token, [(alice, UINT256_MAX), (bob, 1)])
        with pytest.raises(OverflowError):
            aggregate(entries)

    def test_invalid_amount_reported_before_tree(self, alice, bob, token):
        """The first bad entry fails the whole batch; nothing is returned."""
        entries = make_entries(token, [(alice, 1), (bob, 0)])
        with pytest.raises(InvalidAmountException):
            aggregate(entries)


class TestDuplicatePolicy:
    """Tests for repeated (token, account) pairs."""

    def test_reject_by_default(self, alice, bob, token):
        entries = make_entries(token, [(alice, 1), (bob, 2), (alice, 3)])
        with pytest.raises(DuplicateClaimException) as exc_info:
            aggregate(entries)
        assert exc_info.value.details["account"] == address_to_hex(alice)
        assert exc_info.value.details["token"] == address_to_hex(token)

    def test_reject_glossary_name(self, alice, token):
        entries = make_entries(token, [(alice, 1), (alice, 1)])
        with pytest.raises(DuplicateClaimError):
            collect_entries(entries)

    def test_merge_sums_amounts(self, alice, bob, token):
        entries = make_entries(token, [(alice, 1), (bob, 2), (alice, 3)])
        record = aggregate(entries, AggregationConfig(duplicate_policy="merge"))

        assert record.claim_for(alice, token).amount == 4
        assert record.tokens[token].token_total == 6
        assert record.verify_all()

    def test_merge_keeps_first_position(self, alice, bob, token):
        entries = make_entries(token, [(alice, 1), (bob, 2), (alice, 3)])
        merged = collect_entries(entries, duplicate_policy="merge")

        assert [e.account for e in merged] == [alice, bob]
        assert merged[0].amount == 4

    def test_merge_overflow(self, alice, token):
        entries = make_entries(token, [(alice, UINT256_MAX), (alice, 1)])
        with pytest.raises(AmountOverflowException):
            collect_entries(entries, duplicate_policy="merge")

    def test_invalid_policy(self):
        with pytest.raises(ValueError, match="duplicate_policy"):
            AggregationConfig(duplicate_policy="ignore")


class TestOrdering:
    """Tests for entry order handling."""

    def test_given_order_drives_root(self, alice, bob, carol, token):
        forward = aggregate(make_entries(token, [(alice, 200), (bob, 300), (carol, 250)]))
        backward = aggregate(make_entries(token, [(carol, 250), (bob, 300), (alice, 200)]))
        assert forward.merkle_root != backward.merkle_root

    def test_sorted_build_is_order_independent(self, alice, bob, carol, token):
        config = AggregationConfig(sort_entries=True)
        forward = aggregate(make_entries(token, [(alice, 200), (bob, 300), (carol, 250)]), config)
        backward = aggregate(make_entries(token, [(carol, 250), (bob, 300), (alice, 200)]), config)
        assert forward.merkle_root == backward.merkle_root


class TestDistributionRecord:
    """Tests for the published record."""

    def test_export_quantities(self, sample_entries, alice, bob, carol, token):
        exported = aggregate(sample_entries).to_export()
        token_data = exported["tokens"][address_to_hex(token)]

        assert token_data["tokenTotal"] == "0x02ee"
        assert token_data["claims"][address_to_hex(alice)]["earnings"] == "0xc8"
        assert token_data["claims"][address_to_hex(bob)]["earnings"] == "0x012c"
        assert token_data["claims"][address_to_hex(carol)]["earnings"] == "0xfa"

    def test_export_root_and_proofs_are_hex(self, sample_entries, alice, token):
        record = aggregate(sample_entries)
        exported = record.to_export()

        assert exported["merkleRoot"] == record.hex_root
        assert len(exported["merkleRoot"]) == 66
        proof = exported["tokens"][address_to_hex(token)]["claims"][address_to_hex(alice)]["proof"]
        assert proof == record.claim_for(alice, token).hex_proof

    def test_export_round_trip(self, sample_entries):
        record = aggregate(sample_entries)
        restored = DistributionRecord.from_export(record.to_export())

        assert restored == record
        assert restored.verify_all()

    def test_from_export_rejects_bad_root(self, sample_entries):
        exported = aggregate(sample_entries).to_export()
        exported["merkleRoot"] = "0x1234"
        with pytest.raises(ValueError):
            DistributionRecord.from_export(exported)

    def test_claim_for_missing(self, sample_entries, token, other_token):
        record = aggregate(sample_entries)
        with pytest.raises(LeafNotFoundException):
            record.claim_for(make_address("nobody"), token)
        with pytest.raises(LeafNotFoundException):
            record.claim_for(make_address("nobody"), other_token)

    def test_record_is_frozen(self, sample_entries):
        record = aggregate(sample_entries)
        with pytest.raises(ValueError):
            record.merkle_root = b"\x00" * 32

    def test_nested_maps_are_read_only(self, sample_entries, alice, bob, token):
        record = aggregate(sample_entries)
        claims = record.tokens[token].claims

        with pytest.raises(TypeError):
            claims[alice] = claims[bob]
        with pytest.raises(TypeError):
            del record.tokens[token]
        with pytest.raises(AttributeError):
            record.tokens.clear()

        assert record.claim_for(alice, token).amount == 200
        assert record.verify_all()

    def test_source_dict_changes_do_not_leak(self, sample_entries, token):
        record = aggregate(sample_entries)
        tokens = dict(record.tokens)
        copy = DistributionRecord(merkle_root=record.merkle_root, tokens=tokens)

        tokens.clear()
        assert set(copy.tokens) == {token}

    def test_verify_all_detects_altered_amount(self, sample_entries, alice, token):
        exported = aggregate(sample_entries).to_export()
        exported["tokens"][address_to_hex(token)]["claims"][address_to_hex(alice)]["earnings"] = "0xc9"

        assert not DistributionRecord.from_export(exported).verify_all()
