from dataclasses import dataclass
from typing import Any, Dict

FILE = "file"
DIRECTORY = "directory"
RESOURCE_KINDS = (FILE, DIRECTORY)


@dataclass(frozen=True)
class EncryptedResource:
	"""A resource as the listener sees it: an opaque name and its kind."""
	name: str                # darkened path, never decrypted server side
	kind: str                # FILE or DIRECTORY

	def to_dict(self) -> Dict[str, str]:
		return {"name": self.name, "kind": self.kind}


@dataclass(frozen=True)
class Node:
	"""
	Decrypted, client-side view of a resource.
	`parent` is always the directory component of `name` ("" at depth 0).
	"""
	name: str
	kind: str
	parent: str

	@property
	def is_directory(self) -> bool:
		return self.kind == DIRECTORY

	@property
	def basename(self) -> str:
		return self.name.rsplit("/", 1)[-1]


@dataclass
class BodyLs:
	"""Request body of the `ls` verb."""
	name: str

	def to_dict(self) -> Dict[str, Any]:
		return {"name": self.name}


@dataclass
class BodyRead:
	"""Request body of the `cat` verb."""
	name: str

	def to_dict(self) -> Dict[str, Any]:
		return {"name": self.name}
