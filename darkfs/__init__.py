from .crypto import DarkCrypto
from .client import RemoteClient
from .config import ClientConfig
from .store import ResourceStore, darken_directory
from .tree import Tree
from .render import render_tree

__all__ = [
	"DarkCrypto",
	"RemoteClient",
	"ClientConfig",
	"ResourceStore",
	"darken_directory",
	"Tree",
	"render_tree",
]
