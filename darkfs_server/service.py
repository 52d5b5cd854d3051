import base64
import logging
from typing import List

from darkfs.errors import NotFoundError
from darkfs.models import DIRECTORY, EncryptedResource
from darkfs.store import ResourceStore

from .config import ServerConfig

logger = logging.getLogger(__name__)

ENDPOINTS = ("endpoints", "ls", "tree", "cat")


class QueryService:
	"""
	Answers listing and read requests over a darkened store.
	Holds no key and no per-request state; every call reads the store afresh.
	"""

	def __init__(self, config: ServerConfig):
		self.config = config
		self.store = ResourceStore(config.root)

	def endpoints(self) -> str:
		return "".join(f"{verb}\n" for verb in ENDPOINTS)

	def ls(self, name: str) -> str:
		"""
		"<kind>:<content>" for a resource, content being the base64 of the
		stored ciphertext for files and empty for directories.
		Raises NotFoundError for names the store does not know.
		"""
		kind = self.store.kind_of(name)
		logger.debug(f"ls {name} -> {kind}")
		if kind == DIRECTORY:
			return f"{kind}:"
		return f"{kind}:{base64.b64encode(self.store.read(name)).decode('ascii')}"

	def tree(self) -> List[EncryptedResource]:
		return self.store.list()

	def cat(self, name: str) -> bytes:
		"""Stored ciphertext of a file."""
		kind = self.store.kind_of(name)
		if kind == DIRECTORY:
			raise IsADirectoryError(name)
		return self.store.read(name)
