"""
Shared pytest fixtures for the darkfs test suite.

Provides fixtures for:
- Cipher adapters with cheap key derivation
- A plaintext directory and its darkened store
- A Flask test client serving that store
- A requests-compatible session that routes into the test client
"""

from pathlib import Path
from urllib.parse import urlparse

import pytest
import requests

from darkfs.config import ClientConfig
from darkfs.crypto import DarkCrypto
from darkfs.store import darken_directory
from darkfs_server import ServerConfig, create_app

KEY = "correct horse battery staple"
REMOTE_URL = "http://listener.test/"


@pytest.fixture
def key() -> str:
	return KEY


@pytest.fixture
def crypto(key: str) -> DarkCrypto:
	return DarkCrypto(key, iterations=1000)


@pytest.fixture
def other_crypto() -> DarkCrypto:
	return DarkCrypto("not the key", iterations=1000)


@pytest.fixture
def plain_dir(tmp_path: Path) -> Path:
	"""
	docs/
	    empty/
	    notes/a.txt
	    notes/b.txt
	    readme.txt
	"""
	root = tmp_path / "plain" / "docs"
	(root / "empty").mkdir(parents=True)
	(root / "notes").mkdir()
	(root / "notes" / "a.txt").write_bytes(b"alpha\n")
	(root / "notes" / "b.txt").write_bytes(b"beta\n")
	(root / "readme.txt").write_bytes(b"read me first\n")
	return root


@pytest.fixture
def store_root(tmp_path: Path, plain_dir: Path, crypto: DarkCrypto) -> Path:
	return darken_directory(plain_dir, tmp_path / "dark", crypto)


@pytest.fixture
def server_config(store_root: Path) -> ServerConfig:
	return ServerConfig(root=store_root)


@pytest.fixture
def app(server_config: ServerConfig):
	app = create_app(server_config)
	app.config["TESTING"] = True
	return app


@pytest.fixture
def http(app):
	return app.test_client()


class FlaskSession:
	"""Minimal stand-in for requests.Session that answers from a Flask test client."""

	def __init__(self, test_client):
		self.test_client = test_client
		self.calls = []

	def request(self, method, url, **kwargs):
		self.calls.append((method, url, kwargs))
		path = urlparse(url).path
		answer = self.test_client.open(path, method=method, json=kwargs.get("json"))

		resp = requests.Response()
		resp.status_code = answer.status_code
		resp._content = answer.get_data()
		resp.headers.update(answer.headers)
		resp.encoding = "utf-8"
		resp.url = url
		return resp


@pytest.fixture
def session(http) -> FlaskSession:
	return FlaskSession(http)


@pytest.fixture
def client_config() -> ClientConfig:
	return ClientConfig(remote_url=REMOTE_URL, connect_timeout=1.5, read_timeout=7.0)
