"""
Module 02/03 - Merkle Tree and Balance Commitments
Deterministic Merkle tree construction + proof generation/verification,
and the entitlement binding built on top of it.

Owner: Protocol/Crypto Engineer
Module ID: M02, M03

This module provides:
- MerkleTree: Build-once binary tree exposing root and per-leaf proofs
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_root / build_merkle_proof / verify_merkle_proof
- BalanceTree: Tree over (account, token, amount) entries
- encode_leaf: Canonical leaf digest for one entitlement

Canonical Commitment Rules:
1. Leaf hashing: keccak256(account ++ token ++ uint256(amount))
2. Parent hashing: keccak256(min(a, b) ++ max(a, b))
3. Padding: Odd node out is paired with itself at every level
4. Empty tree: EmptyInputException
5. Single leaf: root = leaf, empty proof

Usage:
    from core.merkle import BalanceTree

    tree = BalanceTree(entries)
    proof = tree.proof(account, token, amount)
    assert BalanceTree.verify_proof(account, token, amount, proof, tree.root)
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    merkle_parent,
    build_merkle_root,
    build_merkle_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .balance_tree import (
    BalanceTree,
    encode_leaf,
    sort_entries,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Domain binding
    "BalanceTree",
    "encode_leaf",
    "sort_entries",
]
