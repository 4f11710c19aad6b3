"""Merkle tree construction over an ordered sequence of data blocks."""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Literal

from .errors import InvalidInputError

logger = logging.getLogger(__name__)

HashAlgorithm = Literal["sha256", "sha3_256", "blake2s"]

# Algorithms whose hex digest is 64 characters
HASH_ALGORITHMS: tuple[str, ...] = ("sha256", "sha3_256", "blake2s")
DEFAULT_ALGORITHM: HashAlgorithm = "sha256"

_HASH_RE = re.compile(r"[0-9a-f]{64}")


def _check_hash(value: str) -> None:
    if not isinstance(value, str) or not _HASH_RE.fullmatch(value):
        raise ValueError(f"Malformed node hash: {value!r}")


@dataclass(frozen=True)
class Leaf:
    """A terminal node holding one data block and its hash."""

    block: bytes
    hash: str

    def __post_init__(self) -> None:
        _check_hash(self.hash)

    @property
    def payload(self) -> bytes:
        return self.block


@dataclass(frozen=True)
class InternalNode:
    """A node combining two subtrees.

    ``payload`` is the concatenation of both children's payloads and is only
    kept for diagnostics. ``hash`` commits to the children's hash strings.
    """

    left: Node
    right: Node
    payload: bytes
    hash: str

    def __post_init__(self) -> None:
        _check_hash(self.hash)


Node = Leaf | InternalNode


def compute_hash(data: bytes | str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute the lowercase hex digest of data.

    A new hash object is created per call so no state carries over between
    digests. Text is encoded as UTF-8.
    """
    if algorithm not in HASH_ALGORITHMS:
        raise InvalidInputError(
            f"Unsupported hash algorithm: {algorithm!r} "
            f"(expected one of {', '.join(HASH_ALGORITHMS)})"
        )
    if isinstance(data, str):
        data = data.encode("utf-8")
    h = hashlib.new(algorithm)
    h.update(data)
    return h.hexdigest()


def next_power_of_two(n: int) -> int:
    """Smallest power of two greater than or equal to n (n >= 1)."""
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    return 1 << (n - 1).bit_length()


def pad_blocks(blocks: list[bytes]) -> list[bytes]:
    """Replicate the last block until the length is a power of two."""
    if not blocks:
        raise InvalidInputError("Cannot build a Merkle tree from zero blocks")
    target = next_power_of_two(len(blocks))
    return blocks + [blocks[-1]] * (target - len(blocks))


def make_leaf(block: bytes, algorithm: str = DEFAULT_ALGORITHM) -> Leaf:
    """Hash a block into a leaf."""
    return Leaf(block=block, hash=compute_hash(block, algorithm))


def combine(left: Node, right: Node, algorithm: str = DEFAULT_ALGORITHM) -> InternalNode:
    """Join two subtrees; the parent hash is digest(left.hash + right.hash)."""
    return InternalNode(
        left=left,
        right=right,
        payload=left.payload + right.payload,
        hash=compute_hash(left.hash + right.hash, algorithm),
    )


def _normalize_blocks(blocks: Iterable[bytes | str]) -> list[bytes]:
    normalized: list[bytes] = []
    for i, block in enumerate(blocks):
        if isinstance(block, str):
            normalized.append(block.encode("utf-8"))
        elif isinstance(block, (bytes, bytearray, memoryview)):
            normalized.append(bytes(block))
        else:
            raise InvalidInputError(
                f"Block {i} must be bytes or str, got {type(block).__name__}"
            )
    return normalized


def _build_node(leaves: list[Leaf], algorithm: str) -> Node:
    """Recursively build a subtree over a contiguous run of leaves."""
    size = len(leaves)
    if size == 1:
        return leaves[0]
    if size == 2:
        return combine(leaves[0], leaves[1], algorithm)

    half = size // 2
    left = _build_node(leaves[:half], algorithm)
    right = _build_node(leaves[half:], algorithm)
    return combine(left, right, algorithm)


class MerkleTree:
    """An immutable binary hash tree over padded data blocks."""

    __slots__ = ("_root", "_algorithm", "_block_count")

    def __init__(
        self,
        root: Node,
        algorithm: str = DEFAULT_ALGORITHM,
        block_count: int | None = None,
    ):
        self._root = root
        self._algorithm = algorithm
        self._block_count = block_count

    @classmethod
    def build(
        cls,
        blocks: Iterable[bytes | str],
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> MerkleTree:
        """
        Build a Merkle tree from an ordered sequence of blocks.

        Args:
            blocks: Data blocks; str blocks are encoded as UTF-8
            algorithm: Digest algorithm name (see HASH_ALGORITHMS)

        Returns:
            A MerkleTree with next_power_of_two(len(blocks)) leaves

        Raises:
            InvalidInputError: If blocks is empty, holds a non-bytes value,
                or the algorithm is unsupported
        """
        if algorithm not in HASH_ALGORITHMS:
            raise InvalidInputError(f"Unsupported hash algorithm: {algorithm!r}")

        original = _normalize_blocks(blocks)
        padded = pad_blocks(original)
        leaves = [make_leaf(block, algorithm) for block in padded]
        root = _build_node(leaves, algorithm)

        tree = cls(root=root, algorithm=algorithm, block_count=len(original))
        logger.debug(
            "Built Merkle tree: %d blocks, %d leaves, depth %d, root %s",
            len(original),
            len(leaves),
            tree.depth,
            root.hash,
        )
        return tree

    @property
    def root(self) -> Node:
        return self._root

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def root_hash(self) -> str:
        return self._root.hash

    @property
    def block_count(self) -> int:
        """Number of original blocks before padding."""
        if self._block_count is None:
            return self.leaf_count
        return self._block_count

    @property
    def leaf_count(self) -> int:
        return count_leaves(self._root)

    @property
    def depth(self) -> int:
        return tree_depth(self._root)

    def leaves(self) -> Iterator[Leaf]:
        """Iterate leaves left to right."""
        return iter_leaves(self._root)

    def blocks(self) -> list[bytes]:
        """All leaf blocks left to right, padding included."""
        return [leaf.block for leaf in self.leaves()]

    def nodes(self) -> Iterator[Node]:
        """Iterate nodes in-order (left subtree, node, right subtree)."""
        return iter_nodes(self._root)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self._algorithm == other._algorithm and self._root == other._root

    def __hash__(self) -> int:
        return hash((self._algorithm, self._root.hash))

    def __repr__(self) -> str:
        return (
            f"MerkleTree(root_hash={self.root_hash!r}, "
            f"leaves={self.leaf_count}, algorithm={self._algorithm!r})"
        )


def build_tree(
    blocks: Iterable[bytes | str],
    algorithm: str = DEFAULT_ALGORITHM,
) -> MerkleTree:
    """Build a Merkle tree from blocks. See MerkleTree.build."""
    return MerkleTree.build(blocks, algorithm=algorithm)


def count_leaves(node: Node) -> int:
    match node:
        case Leaf():
            return 1
        case InternalNode(left=left, right=right):
            return count_leaves(left) + count_leaves(right)
    raise TypeError(f"Not a Merkle node: {node!r}")


def tree_depth(node: Node) -> int:
    """Depth of the tree; a single leaf has depth 0."""
    match node:
        case Leaf():
            return 0
        case InternalNode(left=left, right=right):
            return 1 + max(tree_depth(left), tree_depth(right))
    raise TypeError(f"Not a Merkle node: {node!r}")


def iter_leaves(node: Node) -> Iterator[Leaf]:
    match node:
        case Leaf():
            yield node
        case InternalNode(left=left, right=right):
            yield from iter_leaves(left)
            yield from iter_leaves(right)
        case _:
            raise TypeError(f"Not a Merkle node: {node!r}")


def iter_nodes(node: Node) -> Iterator[Node]:
    match node:
        case Leaf():
            yield node
        case InternalNode(left=left, right=right):
            yield from iter_nodes(left)
            yield node
            yield from iter_nodes(right)
        case _:
            raise TypeError(f"Not a Merkle node: {node!r}")
