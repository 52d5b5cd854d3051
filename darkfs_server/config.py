from dataclasses import dataclass
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 1048576  # 1MB


@dataclass(frozen=True)
class ServerConfig:
	"""
	Configuration for a listener. Fixed for the lifetime of the process:
	the app and the query service receive it at construction time.
	"""
	root: Path
	host: str = "127.0.0.1"
	port: int = 4444
	debug: bool = False
	max_body_size: int = MAX_BODY_SIZE

	def __post_init__(self):
		# Ensure it's resolved
		object.__setattr__(self, "root", Path(self.root).resolve())
		if self.max_body_size <= 0:
			raise ValueError("max_body_size must be positive")
