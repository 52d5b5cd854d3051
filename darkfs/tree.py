"""
Client-side reconstruction of a darkened listing.

A listener hands out a flat list of (darkened name, kind) pairs. With the key
we restore every name, derive each node's parent from its path and pick the
shallowest node as the root. Lookups then work on plaintext names only.
"""

import json
import logging
from typing import Iterable, List, Sequence

from .crypto import DarkCrypto, SEPARATOR
from .errors import EmptyTreeError, MalformedListingError, NotFoundError
from .models import EncryptedResource, Node

logger = logging.getLogger(__name__)


def depth(name: str) -> int:
	"""Number of separators in a path; a bare name has depth 0."""
	return name.count(SEPARATOR)


def parent_of(name: str) -> str:
	"""All but the last path segment, "" for a bare name."""
	head, _, _ = name.rpartition(SEPARATOR)
	return head


def parse_listing(payload: str) -> List[EncryptedResource]:
	"""Decode the JSON body of a `tree` answer."""
	try:
		data = json.loads(payload)
	except json.JSONDecodeError as e:
		raise MalformedListingError(f"Listing is not valid JSON: {e}") from e

	if not isinstance(data, list):
		raise MalformedListingError("Listing must be a JSON array")

	resources = []
	for i, item in enumerate(data):
		if not isinstance(item, dict):
			raise MalformedListingError(f"Listing entry {i} is not an object")
		name, kind = item.get("name"), item.get("kind")
		if not isinstance(name, str) or not isinstance(kind, str):
			raise MalformedListingError(f"Listing entry {i} needs string 'name' and 'kind'")
		resources.append(EncryptedResource(name, kind))
	return resources


class Tree:
	"""Ordered set of decrypted nodes with a designated root."""

	def __init__(self, nodes: Sequence[Node]):
		self.nodes: List[Node] = sorted(nodes, key=lambda n: n.name)
		self._by_name = {}
		for node in self.nodes:
			if node.name in self._by_name:
				raise MalformedListingError(f"Duplicate resource in listing: {node.name}")
			self._by_name[node.name] = node
		self.root = self._find_root()

	@classmethod
	def from_resources(cls, resources: Iterable[EncryptedResource], crypto: DarkCrypto) -> 'Tree':
		nodes = []
		for resource in resources:
			name = crypto.restore_path(resource.name)
			nodes.append(Node(name=name, kind=resource.kind, parent=parent_of(name)))
		logger.debug(f"Restored {len(nodes)} nodes from listing")
		return cls(nodes)

	@classmethod
	def from_json(cls, payload: str, crypto: DarkCrypto) -> 'Tree':
		return cls.from_resources(parse_listing(payload), crypto)

	def _find_root(self) -> str:
		if not self.nodes:
			raise EmptyTreeError("Listing contains no resources, cannot determine a root")

		# nodes are name-sorted, so the first minimum is also the smallest name
		root = min(self.nodes, key=lambda n: depth(n.name))
		ties = [n.name for n in self.nodes if depth(n.name) == depth(root.name)]
		if len(ties) > 1:
			logger.warning(f"Multiple candidate roots {ties}, using {root.name}")
		return root.name

	def __len__(self) -> int:
		return len(self.nodes)

	def __iter__(self):
		return iter(self.nodes)

	def get(self, name: str) -> Node:
		node = self._by_name.get(name)
		if node is None:
			raise NotFoundError(f"Node {name} doesn't exist")
		return node

	def exists(self, name: str) -> bool:
		return name in self._by_name

	def is_directory(self, name: str) -> bool:
		return self.get(name).is_directory

	def children_of(self, name: str) -> List[str]:
		"""Names of the nodes directly under `name`."""
		return [n.name for n in self.nodes if n.parent == name]

	def descendants_of(self, prefix: str) -> List[str]:
		"""
		Names of every node below `prefix`, at any depth.
		Matching is segment aware: "foo" does not reach into a sibling "foo2".
		"""
		if not prefix:
			# everything hangs below the unnamed top level
			return [n.name for n in self.nodes]
		boundary = prefix + SEPARATOR
		return [
			n.name for n in self.nodes
			if n.parent == prefix or n.parent.startswith(boundary)
		]

	def root_directory(self) -> str:
		return self.root
