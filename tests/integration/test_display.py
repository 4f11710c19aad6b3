"""Tests for tree and mismatch rendering."""

from rich.console import Console

from merkle_diff.compare import compare_trees
from merkle_diff.display import format_hashes, format_payloads, print_mismatches, render_tree
from merkle_diff.merkle import build_tree


def test_format_hashes_in_order():
    tree = build_tree(["test1", "test2"])
    expected = " ".join([tree.root.left.hash, tree.root.hash, tree.root.right.hash])
    assert format_hashes(tree) == expected


def test_format_payloads_in_order():
    tree = build_tree(["test1", "test2"])
    assert format_payloads(tree) == "test1 test1test2 test2"


def test_render_tree_single_leaf():
    console = Console(record=True, width=120)
    console.print(render_tree(build_tree(["single"]), show_data=True))
    text = console.export_text()
    assert "1 leaves" in text
    assert "'single'" in text


def test_print_mismatches_equal_trees():
    console = Console(record=True, width=120)
    print_mismatches(console, compare_trees(build_tree(["a"]), build_tree(["a"])))
    assert "Trees are equal" in console.export_text()


def test_print_mismatches_keeps_markup_literal():
    """Block text containing brackets is printed verbatim."""
    console = Console(record=True, width=120)
    report = compare_trees(build_tree(["[red]x[/red]"]), build_tree(["y"]))
    print_mismatches(console, report)
    text = console.export_text()
    assert "[red]x[/red]" in text
    assert "1 mismatched block " in text
