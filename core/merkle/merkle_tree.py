"""
Module 02 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf index
- Merkle proof verification that needs nothing but leaf, siblings and root
- Standard padding rule for odd number of nodes

Canonical Commitment Rules (Hard Contracts):
1. Leaves are 32-byte digests supplied by the caller (see balance_tree.py)
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b))
3. Padding rule: the last node of an odd level is paired with itself
4. Empty leaves: construction fails with EmptyInputException
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is defined by upstream; this module never sorts leaves
- Sorted-pair hashing makes proofs position-free: a proof is a flat list of
  sibling digests with no left/right flags
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import DIGEST_SIZE, hash_pair, to_hex
from core.schemas.errors import EmptyInputException


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf digest being proven
        index: The 0-based index of the leaf in the original leaf list
            (informational; verification does not use it)
        siblings: Sibling digests from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def verify(self) -> bool:
        """Check this proof against its own root."""
        return verify_merkle_proof(self.leaf, self.siblings, self.root)

    def hex_siblings(self) -> list[str]:
        return [to_hex(s) for s in self.siblings]


def merkle_parent(a: bytes, b: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Children are ordered byte-lexicographically before hashing, so
    merkle_parent(a, b) == merkle_parent(b, a).
    """
    return hash_pair(a, b)


def _next_level(level: Sequence[bytes]) -> list[bytes]:
    parents: list[bytes] = []
    for i in range(0, len(level), 2):
        left = level[i]
        # Odd node out is paired with itself
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(merkle_parent(left, right))
    return parents


def _build_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    if len(leaves) == 0:
        raise EmptyInputException()

    for i, leaf in enumerate(leaves):
        if len(leaf) != DIGEST_SIZE:
            raise ValueError(
                f"Leaf {i} must be {DIGEST_SIZE} bytes, got {len(leaf)}"
            )

    layers: list[list[bytes]] = [[bytes(leaf) for leaf in leaves]]
    while len(layers[-1]) > 1:
        layers.append(_next_level(layers[-1]))
    return layers


class MerkleTree:
    """
    Binary Merkle tree built once over an ordered list of leaf digests.

    All levels are kept in memory so proofs are read without rehashing.

    Example:
        >>> from core.crypto.hashing import keccak256
        >>> tree = MerkleTree([keccak256(b"a"), keccak256(b"b"), keccak256(b"c")])
        >>> len(tree.proof(2))
        2
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        self._layers = _build_layers(leaves)
        logger.debug(
            f"Built Merkle tree: {len(leaves)} leaves, depth {self.depth}, "
            f"root {self.hex_root}"
        )

    @property
    def layers(self) -> list[list[bytes]]:
        """Copy of every level, leaves first and root last."""
        return [list(layer) for layer in self._layers]

    @property
    def leaves(self) -> list[bytes]:
        return list(self._layers[0])

    @property
    def leaf_count(self) -> int:
        return len(self._layers[0])

    @property
    def depth(self) -> int:
        """Number of levels above the leaves (equals every proof's length)."""
        return len(self._layers) - 1

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    def proof(self, index: int) -> list[bytes]:
        """
        Sibling digests for the leaf at ``index``, bottom-up.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= self.leaf_count:
            raise IndexError(
                f"Leaf index {index} out of range for {self.leaf_count} leaves"
            )

        siblings: list[bytes] = []
        current_index = index
        for level in self._layers[:-1]:
            sibling_index = current_index ^ 1
            if sibling_index < len(level):
                siblings.append(level[sibling_index])
            else:
                # Self-paired odd node: its own digest is the sibling
                siblings.append(level[current_index])
            current_index //= 2
        return siblings

    def hex_proof(self, index: int) -> list[str]:
        return [to_hex(s) for s in self.proof(index)]

    def merkle_proof(self, index: int) -> MerkleProof:
        siblings = self.proof(index)
        return MerkleProof(
            leaf=self._layers[0][index],
            index=index,
            siblings=tuple(siblings),
            root=self.root,
        )

    def verify(self, leaf: bytes, siblings: Sequence[bytes]) -> bool:
        return verify_merkle_proof(leaf, siblings, self.root)


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf digests.

    Padding Rule: the last node of an odd level is paired with itself.
    Example: [a, b, c] -> [parent(a,b), parent(c,c)] -> root

    Raises:
        EmptyInputException: If leaves is empty
    """
    return MerkleTree(leaves).root


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        EmptyInputException: If leaves is empty
        IndexError: If index is out of range
    """
    return MerkleTree(leaves).merkle_proof(index)


def verify_merkle_proof(
    leaf: bytes,
    siblings: Sequence[bytes],
    root: bytes,
) -> bool:
    """
    Verify a Merkle proof.

    Algorithm:
    1. Start with the leaf digest
    2. For each sibling (bottom-up): running = parent(running, sibling)
    3. Accept iff the result equals the claimed root

    Malformed input (any element not 32 bytes) is rejected rather than
    raised, so a verifier can be fed untrusted proofs directly.

    Returns:
        True if proof is valid, False otherwise
    """
    if len(leaf) != DIGEST_SIZE or len(root) != DIGEST_SIZE:
        return False

    current_hash = bytes(leaf)
    for sibling in siblings:
        if len(sibling) != DIGEST_SIZE:
            return False
        current_hash = merkle_parent(current_hash, bytes(sibling))

    return current_hash == bytes(root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels above the leaves for a tree of ``num_leaves`` leaves.

    This equals the length of every proof: ceil(log2(n)), 0 for one leaf.

    Raises:
        EmptyInputException: If num_leaves is zero
    """
    if num_leaves <= 0:
        raise EmptyInputException()

    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
