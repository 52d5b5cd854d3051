"""
Exception hierarchy shared by the client, the store and the listener.

Library code raises these; only the command line boundary decides how a
failure ends the process.
"""


class DarkFSError(Exception):
	"""Base class for every darkfs failure."""


class ConfigurationError(DarkFSError):
	"""Required configuration is missing or unusable."""


class TransportError(DarkFSError):
	"""The remote listener could not be reached or answered garbage."""


class RemoteError(TransportError):
	"""The listener answered with a non-200 status."""
	def __init__(self, status: int, body: str):
		self.status = status
		self.body = body
		super().__init__(f"Listener answered {status}: {body.strip()}")


class StoreError(DarkFSError):
	"""Listing or lookup against the underlying store failed."""


class RootNotFound(StoreError):
	"""The configured store root does not exist."""


class LogicError(DarkFSError):
	"""The request was well formed but cannot be answered."""


class NotFoundError(LogicError):
	"""A resource name is not present in the store or tree."""


class EmptyTreeError(LogicError):
	"""A listing decrypted to no nodes at all."""


class InvalidResourceKind(LogicError):
	"""A node carries a kind that is neither file nor directory."""


class MalformedListingError(DarkFSError):
	"""A listing payload does not have the expected structure."""


class DecryptionError(DarkFSError):
	"""Ciphertext failed authentication under the given key."""


class CorruptDataError(DarkFSError):
	"""Ciphertext is not even decodable (bad encoding or truncated)."""


class InvalidPathError(LogicError, ValueError):
	"""A plaintext path is empty or has an empty segment."""
