import logging
from typing import List, Optional, Tuple

from .errors import InvalidResourceKind
from .models import DIRECTORY, FILE
from .tree import Tree

logger = logging.getLogger(__name__)

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "|   "
SPACE = "    "


def format_line(name: str, last: bool, ancestors_last: Tuple[bool, ...]) -> str:
	"""
	Imitate one line of the `tree` command.
	`ancestors_last` holds, for every ancestor between the root and this
	node, whether that ancestor was the last of its siblings; a last
	ancestor has no more siblings coming so its vertical bar is dropped.
	"""
	prefix = "".join(SPACE if inlast else PIPE for inlast in ancestors_last)
	connector = LAST_BRANCH if last else BRANCH
	return prefix + connector + name.rsplit("/", 1)[-1]


def render_lines(tree: Tree) -> List[str]:
	"""
	Walk the tree depth-first from its root and return the rendered lines.
	Uses an explicit stack of (name, last, ancestors_last) frames so deep
	hierarchies do not hit the recursion limit.
	"""
	lines = []
	stack: List[Tuple[str, bool, Optional[Tuple[bool, ...]]]] = [(tree.root_directory(), True, None)]

	while stack:
		name, last, ancestors_last = stack.pop()
		node = tree.get(name)

		if ancestors_last is None:
			# root line carries no connector
			lines.append(node.basename)
			inherited: Tuple[bool, ...] = ()
		else:
			lines.append(format_line(name, last, ancestors_last))
			inherited = ancestors_last + (last,)

		if node.kind == FILE:
			continue
		if node.kind != DIRECTORY:
			raise InvalidResourceKind(f"Resource {node.name} has undefined kind {node.kind!r}")

		children = tree.children_of(name)
		for i in reversed(range(len(children))):
			stack.append((children[i], i == len(children) - 1, inherited))

	logger.debug(f"Rendered {len(lines)} lines from root {tree.root_directory()}")
	return lines


def render_tree(tree: Tree) -> str:
	return "\n".join(render_lines(tree))
