"""merkle-diff - Locate differing blocks between two Merkle trees."""

__version__ = "0.1.0"

# Directory and file constants
CONFIG_DIR = ".merkle-diff"
CONFIG_FILE = "config.json"

from .compare import MismatchReport, compare_trees, find_mismatches, is_equal  # noqa: E402
from .errors import InvalidInputError, MerkleError, ShapeMismatchError  # noqa: E402
from .merkle import InternalNode, Leaf, MerkleTree, Node, build_tree, compute_hash  # noqa: E402

__all__ = [
    "InternalNode",
    "InvalidInputError",
    "Leaf",
    "MerkleError",
    "MerkleTree",
    "MismatchReport",
    "Node",
    "ShapeMismatchError",
    "build_tree",
    "compare_trees",
    "compute_hash",
    "find_mismatches",
    "is_equal",
]
