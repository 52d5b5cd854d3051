import base64
import binascii
import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from .config import ClientConfig
from .crypto import DarkCrypto
from .errors import CorruptDataError, NotFoundError, RemoteError, TransportError
from .models import DIRECTORY, FILE, BodyLs, BodyRead, EncryptedResource
from .render import render_tree
from .tree import Tree, parse_listing

logger = logging.getLogger(__name__)


@dataclass
class LsResult:
	"""Decrypted answer of a remote `ls`."""
	name: str
	kind: str
	entries: List[str]   # direct children for a directory, the name itself for a file
	size: Optional[int] = None  # plaintext size, files only


class RemoteClient:
	"""
	Talks to a listener that serves a darkened store.
	The key never leaves this object: names are darkened before they are sent
	and answers are restored locally. One request per operation, no retries.
	"""

	def __init__(self, config: ClientConfig, crypto: Optional[DarkCrypto], session: Optional[requests.Session] = None):
		self.config = config
		self.crypto = crypto
		self.session = session if session is not None else requests.Session()

	def _url(self, verb: str) -> str:
		return self.config.require_remote_url() + verb

	def _request(self, method: str, verb: str, **kwargs) -> requests.Response:
		"""
		Request wrapper handling timeouts, status checks and logging.
		"""
		url = self._url(verb)
		kwargs.setdefault("timeout", self.config.timeout)
		try:
			resp = self.session.request(method, url, **kwargs)
		except requests.RequestException as e:
			logger.error(f"Request failed: {method} {url} - {e}")
			raise TransportError(f"Request to {url} failed: {e}") from e

		logger.debug(f"{method} {url} -> {resp.status_code}")
		if resp.status_code != 200:
			raise RemoteError(resp.status_code, resp.text)
		return resp

	def endpoints(self) -> List[str]:
		resp = self._request("GET", "endpoints")
		return [line for line in resp.text.splitlines() if line]

	def listing(self) -> List[EncryptedResource]:
		"""Raw darkened listing, as served."""
		resp = self._request("GET", "tree")
		return parse_listing(resp.text)

	def tree(self) -> Tree:
		return Tree.from_resources(self.listing(), self.crypto)

	def render_tree(self) -> str:
		return render_tree(self.tree())

	def exists(self, name: str) -> bool:
		return self.tree().exists(name)

	def is_directory(self, name: str) -> bool:
		return self.tree().is_directory(name)

	def cat(self, name: str) -> bytes:
		"""Fetch a file and return its decrypted content."""
		body = BodyRead(self.crypto.darken_path(name))
		resp = self._request("POST", "cat", json=body.to_dict())
		return self.crypto.decrypt_content(resp.content)

	def ls(self, name: str) -> LsResult:
		body = BodyLs(self.crypto.darken_path(name))
		resp = self._request("POST", "ls", json=body.to_dict())

		# the listener reports unknown names as a 200 with a plain message
		kind, sep, content = resp.text.partition(":")
		if not sep or kind not in (FILE, DIRECTORY):
			raise NotFoundError(resp.text.strip() or f"Unknown resource: {name}")

		if kind == FILE:
			try:
				encrypted = base64.b64decode(content, validate=True)
			except binascii.Error as e:
				raise CorruptDataError(f"ls answer for {name} is not base64") from e
			plaintext = self.crypto.decrypt_content(encrypted)
			return LsResult(name=name, kind=FILE, entries=[name], size=len(plaintext))

		tree = self.tree()
		return LsResult(name=name, kind=DIRECTORY, entries=tree.children_of(name))
