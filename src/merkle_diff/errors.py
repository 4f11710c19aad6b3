"""Exceptions raised by merkle-diff."""


class MerkleError(Exception):
    """Base exception for Merkle tree errors."""

    pass


class InvalidInputError(MerkleError, ValueError):
    """Raised when a tree cannot be built from the given blocks."""

    pass


class ShapeMismatchError(MerkleError):
    """Raised when two trees of different shape are compared."""

    pass
