"""Test ASCII rendering of reconstructed trees."""

import pytest

from darkfs.errors import InvalidResourceKind
from darkfs.models import DIRECTORY, FILE, Node
from darkfs.render import format_line, render_lines, render_tree
from darkfs.tree import Tree, parent_of


def make_tree(*entries) -> Tree:
	return Tree([Node(name, kind, parent_of(name)) for name, kind in entries])


def test_simple_tree() -> None:
	tree = make_tree(("a", DIRECTORY), ("a/b", FILE), ("a/c", DIRECTORY), ("a/c/d", FILE))
	assert render_tree(tree) == (
		"a\n"
		"├── b\n"
		"└── c\n"
		"    └── d"
	)


def test_vertical_bar_continues_under_non_last_sibling() -> None:
	tree = make_tree(
		("a", DIRECTORY),
		("a/b", DIRECTORY),
		("a/b/x", FILE),
		("a/b/y", FILE),
		("a/c", FILE),
	)
	assert render_lines(tree) == [
		"a",
		"├── b",
		"|   ├── x",
		"|   └── y",
		"└── c",
	]


def test_deeper_levels_track_every_ancestor() -> None:
	tree = make_tree(
		("r", DIRECTORY),
		("r/a", DIRECTORY),
		("r/a/b", DIRECTORY),
		("r/a/b/c", FILE),
		("r/a/z", FILE),
		("r/last", DIRECTORY),
		("r/last/in", DIRECTORY),
		("r/last/in/leaf", FILE),
	)
	assert render_lines(tree) == [
		"r",
		"├── a",
		"|   ├── b",
		"|   |   └── c",
		"|   └── z",
		"└── last",
		"    └── in",
		"        └── leaf",
	]


def test_file_root_renders_alone() -> None:
	assert render_lines(make_tree(("only.txt", FILE))) == ["only.txt"]


def test_empty_directory_root() -> None:
	assert render_lines(make_tree(("empty", DIRECTORY))) == ["empty"]


def test_relative_depth_for_nested_root() -> None:
	tree = make_tree(("x/y", DIRECTORY), ("x/y/z", FILE))
	assert render_lines(tree) == ["y", "└── z"]


def test_invalid_kind_is_fatal() -> None:
	tree = make_tree(("a", DIRECTORY), ("a/b", "symlink"))
	with pytest.raises(InvalidResourceKind):
		render_lines(tree)


def test_invalid_root_kind_is_fatal() -> None:
	with pytest.raises(InvalidResourceKind):
		render_lines(make_tree(("a", "device")))


def test_deep_hierarchy_does_not_recurse() -> None:
	names = ["d"]
	for i in range(1200):
		names.append(f"{names[-1]}/d")
	tree = make_tree(*[(n, DIRECTORY) for n in names])
	lines = render_lines(tree)
	assert len(lines) == len(names)
	assert lines[-1] == " " * 4 * 1199 + "└── d"


@pytest.mark.parametrize("last,ancestors,expected", [
	(False, (), "├── n"),
	(True, (), "└── n"),
	(False, (False,), "|   ├── n"),
	(True, (True,), "    └── n"),
	(True, (False, True), "|       └── n"),
])
def test_format_line(last, ancestors, expected) -> None:
	assert format_line("p/q/n", last, ancestors) == expected
