import json
import os
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REMOTE_URL_ENV = "DARKFS_REMOTE_URL"
KEY_ENV = "DARKFS_KEY"
CONFIG_ENV = "DARKFS_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".darkfs" / "config.json"


def default_config_path() -> Path:
	override = os.environ.get(CONFIG_ENV)
	return Path(override) if override else DEFAULT_CONFIG_PATH


@dataclass
class ClientConfig:
	"""Configuration for talking to a remote listener."""
	remote_url: Optional[str] = None  # e.g. "http://127.0.0.1:4444/", trailing "/" required
	connect_timeout: float = 5.0
	read_timeout: float = 30.0

	def to_dict(self) -> dict:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: dict) -> 'ClientConfig':
		# Only use known fields
		known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
		return cls(**known)

	def save(self, path: Path):
		"""Save config to JSON file."""
		path.parent.mkdir(parents=True, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as f:
			json.dump(self.to_dict(), f, indent=2)
		logger.debug(f"Saved client config to {path}")

	@classmethod
	def load(cls, path: Path) -> 'ClientConfig':
		"""Load config from JSON file, or return defaults if not found."""
		if not path.exists():
			logger.debug(f"No config found at {path}, using defaults")
			return cls()

		try:
			with open(path, 'r', encoding='utf-8') as f:
				data = json.load(f)
			return cls.from_dict(data)
		except (json.JSONDecodeError, IOError) as e:
			logger.warning(f"Failed to load config: {e}, using defaults")
			return cls()

	@classmethod
	def from_env(cls, path: Optional[Path] = None) -> 'ClientConfig':
		"""Config file values, with the remote URL overridable from the environment."""
		config = cls.load(path if path else default_config_path())
		url = os.environ.get(REMOTE_URL_ENV)
		if url:
			config.remote_url = url
		return config

	@property
	def timeout(self):
		return (self.connect_timeout, self.read_timeout)

	def require_remote_url(self) -> str:
		if not self.remote_url:
			raise ConfigurationError(
				f"Configure {REMOTE_URL_ENV} or run `darkfs configremote <url>` before "
				f"talking to a listener. See `darkfs --help`"
			)
		if not self.remote_url.endswith("/"):
			raise ConfigurationError(
				f"Remote URL must end with '/': {self.remote_url!r} (try {self.remote_url + '/'!r})"
			)
		return self.remote_url


def resolve_key(key: Optional[str]) -> str:
	"""Key given on the command line, else from the environment."""
	key = key or os.environ.get(KEY_ENV)
	if not key:
		raise ConfigurationError(f"No key given. Pass --key or set {KEY_ENV}")
	return key
