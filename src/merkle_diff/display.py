"""Rich rendering of Merkle trees and comparison results."""

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from .compare import MismatchReport
from .merkle import InternalNode, Leaf, MerkleTree, Node


def _decode(data: bytes, encoding: str) -> str:
    return data.decode(encoding, errors="replace")


def format_hashes(tree: MerkleTree) -> str:
    """Node hashes in-order (left subtree, node, right subtree)."""
    return " ".join(node.hash for node in tree.nodes())


def format_payloads(tree: MerkleTree, encoding: str = "utf-8") -> str:
    """Node payloads in-order, decoded as text."""
    return " ".join(_decode(node.payload, encoding) for node in tree.nodes())


def _short(hash_: str) -> str:
    return hash_[:12]


def _add_node(branch: Tree, node: Node, encoding: str, show_data: bool) -> None:
    match node:
        case Leaf():
            label = Text()
            label.append(_short(node.hash), style="green")
            if show_data:
                label.append(f"  {_decode(node.block, encoding)!r}", style="dim")
            branch.add(label)
        case InternalNode():
            label = Text(_short(node.hash), style="bold cyan")
            child = branch.add(label)
            _add_node(child, node.left, encoding, show_data)
            _add_node(child, node.right, encoding, show_data)


def render_tree(tree: MerkleTree, encoding: str = "utf-8", show_data: bool = False) -> Tree:
    """Build a rich Tree showing abbreviated hashes and optionally leaf data."""
    title = Text()
    title.append("root ", style="bold")
    title.append(tree.root_hash, style="cyan")
    title.append(f"\n{tree.leaf_count} leaves, depth {tree.depth}, {tree.algorithm}", style="dim")
    rendered = Tree(title)

    match tree.root:
        case Leaf():
            _add_node(rendered, tree.root, encoding, show_data)
        case InternalNode(left=left, right=right):
            _add_node(rendered, left, encoding, show_data)
            _add_node(rendered, right, encoding, show_data)
    return rendered


def print_mismatches(console: Console, report: MismatchReport, encoding: str = "utf-8") -> None:
    """Print each mismatched pair as two lines followed by a blank line."""
    if not report.has_changes:
        console.print("[green]Trees are equal.[/green]")
        return

    for text_a, text_b in report.decoded(encoding):
        console.print(text_a, markup=False, highlight=False)
        console.print(text_b, markup=False, highlight=False)
        console.print()

    console.print(
        f"[yellow]{report.total_mismatches} mismatched "
        f"{'block' if report.total_mismatches == 1 else 'blocks'}[/yellow] "
        f"across {report.leaf_count} leaves"
    )
