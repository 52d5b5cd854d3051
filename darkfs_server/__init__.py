from .config import ServerConfig
from .server import create_app, run_server
from .service import QueryService

__all__ = ["ServerConfig", "create_app", "run_server", "QueryService"]
