import os
import shutil
import logging
from pathlib import Path
from typing import List

from .crypto import DarkCrypto, SEPARATOR
from .errors import NotFoundError, RootNotFound, StoreError
from .models import DIRECTORY, FILE, EncryptedResource

logger = logging.getLogger(__name__)


class ResourceStore:
	"""
	Read-only view of a darkened directory on disk.

	The root directory's own name is a darkened segment, and so is every
	name beneath it. Resource names handed out and accepted by the store are
	relative to the root's parent, so the root itself is the single depth-0
	resource. The store never holds a key.
	"""

	def __init__(self, root: Path):
		self.root = Path(root).resolve()

	@property
	def root_name(self) -> str:
		return self.root.name

	def _require_root(self):
		if not self.root.is_dir():
			raise RootNotFound(f"Store root does not exist: {self.root}")

	def list(self) -> List[EncryptedResource]:
		"""
		Enumerate every resource under the root, root first, depth-first with
		siblings in name order.
		"""
		self._require_root()

		resources = []
		stack = [(self.root_name, self.root, DIRECTORY)]
		while stack:
			name, path, kind = stack.pop()
			resources.append(EncryptedResource(name, kind))
			if kind != DIRECTORY:
				continue

			try:
				with os.scandir(path) as it:
					entries = sorted(it, key=lambda e: e.name)
				children = []
				for entry in entries:
					if entry.is_symlink():
						# links are not part of the store, see resolve()
						logger.warning(f"Skipping symlink {entry.path}")
						continue
					if entry.is_dir(follow_symlinks=False):
						child_kind = DIRECTORY
					elif entry.is_file(follow_symlinks=False):
						child_kind = FILE
					else:
						logger.warning(f"Skipping special file {entry.path}")
						continue
					children.append((f"{name}{SEPARATOR}{entry.name}", Path(entry.path), child_kind))
			except OSError as e:
				# a partial listing would silently drop resources
				raise StoreError(f"Failed to enumerate {path}: {e}") from e
			stack.extend(reversed(children))

		logger.debug(f"Listed {len(resources)} resources under {self.root}")
		return resources

	def resolve(self, name: str) -> Path:
		"""
		Map a darkened resource name to its path on disk.
		Raises NotFoundError for names that do not belong to this store.
		"""
		segments = name.split(SEPARATOR) if name else []
		if not segments or segments[0] != self.root_name:
			raise NotFoundError(f"Unknown resource: {name}")
		for segment in segments:
			if segment in ("", ".", "..") or "\\" in segment or "\x00" in segment:
				raise NotFoundError(f"Unknown resource: {name}")
		path = self.root
		for segment in segments[1:]:
			path = path / segment
			# a link anywhere on the way is not part of the store
			if path.is_symlink():
				raise NotFoundError(f"Unknown resource: {name}")
		if not path.exists():
			raise NotFoundError(f"Unknown resource: {name}")
		return path

	def kind_of(self, name: str) -> str:
		self._require_root()
		path = self.resolve(name)
		if path.is_dir():
			return DIRECTORY
		if path.is_file():
			return FILE
		raise NotFoundError(f"Unknown resource: {name}")

	def read(self, name: str) -> bytes:
		"""Return the stored (still encrypted) content of a file resource."""
		self._require_root()
		path = self.resolve(name)
		if not path.is_file():
			raise NotFoundError(f"Not a file: {name}")
		try:
			return path.read_bytes()
		except OSError as e:
			raise StoreError(f"Failed to read {path}: {e}") from e


def _raise_walk_error(e: OSError):
	raise StoreError(f"Failed to read {e.filename}: {e}") from e


def _darken_tree(source: Path, destination: Path, crypto: DarkCrypto) -> int:
	count = 0
	for current, dirs, files in os.walk(source, onerror=_raise_walk_error):
		current = Path(current)
		for dirname in [d for d in dirs if (current / d).is_symlink()]:
			logger.warning(f"Skipping symlinked directory {current / dirname}")
			dirs.remove(dirname)
		dirs.sort()

		rel = current.relative_to(source.parent).as_posix()
		target_dir = destination / crypto.darken_path(rel)
		target_dir.mkdir(parents=True, exist_ok=True)
		for filename in sorted(files):
			if (current / filename).is_symlink():
				logger.warning(f"Skipping symlink {current / filename}")
				continue
			target = destination / crypto.darken_path(f"{rel}{SEPARATOR}{filename}")
			with open(current / filename, 'rb') as f:
				data = f.read()
			with open(target, 'wb') as f:
				f.write(crypto.encrypt_content(data))
			count += 1
	return count


def darken_directory(source: Path, destination: Path, crypto: DarkCrypto) -> Path:
	"""
	Copy a plaintext directory into a darkened store under `destination`.
	Returns the darkened root directory, which is what a listener serves.
	Symlinks in the source are skipped. On failure nothing is left behind.
	"""
	source = Path(source).resolve()
	destination = Path(destination).resolve()
	if not source.is_dir():
		raise NotFoundError(f"Not a directory: {source}")

	dark_root = destination / crypto.darken_path(source.name)
	if dark_root.exists():
		raise FileExistsError(f"Darkened root already exists: {dark_root}")

	try:
		count = _darken_tree(source, destination, crypto)
	except OSError as e:
		logger.error(f"Darkening {source} failed, removing {dark_root}")
		shutil.rmtree(dark_root, ignore_errors=True)
		raise StoreError(f"Failed to darken {source}: {e}") from e
	except Exception:
		logger.error(f"Darkening {source} failed, removing {dark_root}")
		shutil.rmtree(dark_root, ignore_errors=True)
		raise

	logger.info(f"Darkened {count} files from {source} into {dark_root}")
	return dark_root
