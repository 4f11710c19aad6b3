"""Comparison of two Merkle trees built over the same number of blocks."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import ShapeMismatchError
from .merkle import InternalNode, Leaf, MerkleTree, Node, count_leaves

logger = logging.getLogger(__name__)

Mismatch = tuple[bytes, bytes]


@dataclass
class MismatchReport:
    """Result of comparing two Merkle trees."""

    root_hash_a: str
    root_hash_b: str
    leaf_count: int
    mismatches: list[Mismatch] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Check if any leaf differs."""
        return bool(self.mismatches)

    @property
    def total_mismatches(self) -> int:
        return len(self.mismatches)

    def decoded(self, encoding: str = "utf-8") -> Iterator[tuple[str, str]]:
        """Yield mismatched pairs as text."""
        for block_a, block_b in self.mismatches:
            yield (
                block_a.decode(encoding, errors="replace"),
                block_b.decode(encoding, errors="replace"),
            )


def _unwrap(a: MerkleTree | Node, b: MerkleTree | Node) -> tuple[Node, Node]:
    """Return the root nodes of a and b after checking they share a shape.

    Both arguments must be MerkleTree instances or both bare nodes; the hash
    algorithm can only be checked for trees.
    """
    if isinstance(a, MerkleTree) != isinstance(b, MerkleTree):
        raise TypeError(
            f"Cannot compare {type(a).__name__} with {type(b).__name__}; "
            "pass two MerkleTree instances or two nodes"
        )
    if isinstance(a, MerkleTree):
        if a.algorithm != b.algorithm:
            raise ShapeMismatchError(
                f"Trees use different hash algorithms: {a.algorithm} vs {b.algorithm}"
            )
        root_a, root_b = a.root, b.root
    else:
        root_a, root_b = a, b

    leaves_a = count_leaves(root_a)
    leaves_b = count_leaves(root_b)
    if leaves_a != leaves_b:
        raise ShapeMismatchError(
            f"Cannot compare trees with different leaf counts: {leaves_a} vs {leaves_b}"
        )
    _check_same_shape(root_a, root_b)
    return root_a, root_b


def _variant_mismatch(a: Node, b: Node) -> ShapeMismatchError:
    return ShapeMismatchError(
        f"Trees differ in shape: {type(a).__name__} opposite {type(b).__name__}"
    )


def _check_same_shape(a: Node, b: Node) -> None:
    """Raise unless both nodes have identical structure."""
    match (a, b):
        case (Leaf(), Leaf()):
            return
        case (InternalNode(), InternalNode()):
            _check_same_shape(a.left, b.left)
            _check_same_shape(a.right, b.right)
        case _:
            raise _variant_mismatch(a, b)


def _nodes_equal(a: Node, b: Node) -> bool:
    match (a, b):
        case (Leaf(), Leaf()):
            return a.hash == b.hash
        case (InternalNode(), InternalNode()):
            return (
                a.hash == b.hash
                and _nodes_equal(a.left, b.left)
                and _nodes_equal(a.right, b.right)
            )
    raise _variant_mismatch(a, b)


def _collect_mismatches(a: Node, b: Node, prune: bool, out: list[Mismatch]) -> None:
    """Walk both nodes in lock-step, appending differing leaf pairs in order."""
    match (a, b):
        case (Leaf(), Leaf()):
            if a.hash != b.hash:
                out.append((a.block, b.block))
        case (InternalNode(), InternalNode()):
            if prune and a.hash == b.hash:
                return
            _collect_mismatches(a.left, b.left, prune, out)
            _collect_mismatches(a.right, b.right, prune, out)
        case _:
            raise _variant_mismatch(a, b)


def is_equal(a: MerkleTree | Node, b: MerkleTree | Node) -> bool:
    """
    Check whether two trees are equal.

    Leaves are equal when their hashes match. Internal nodes are equal when
    their own hashes match and both child pairs are equal.

    Raises:
        ShapeMismatchError: If the trees differ in shape or
            hash algorithms
    """
    root_a, root_b = _unwrap(a, b)
    return _nodes_equal(root_a, root_b)


def find_mismatches(
    a: MerkleTree | Node,
    b: MerkleTree | Node,
    prune: bool = False,
) -> list[Mismatch]:
    """
    Find leaf blocks that differ between two trees of the same shape.

    Args:
        a: First tree
        b: Second tree
        prune: Skip subtrees whose combined hashes are equal. The result is
            the same as the full walk.

    Returns:
        (block_a, block_b) pairs in left-to-right leaf order. Padding leaves
        are reported like any other leaf.

    Raises:
        ShapeMismatchError: If the trees differ in shape or
            hash algorithms
    """
    root_a, root_b = _unwrap(a, b)
    mismatches: list[Mismatch] = []
    _collect_mismatches(root_a, root_b, prune, mismatches)
    logger.debug("Found %d mismatched leaves (prune=%s)", len(mismatches), prune)
    return mismatches


def compare_trees(a: MerkleTree, b: MerkleTree, prune: bool = False) -> MismatchReport:
    """Compare two trees and wrap the mismatches in a report."""
    mismatches = find_mismatches(a, b, prune=prune)
    return MismatchReport(
        root_hash_a=a.root_hash,
        root_hash_b=b.root_hash,
        leaf_count=a.leaf_count,
        mismatches=mismatches,
    )
