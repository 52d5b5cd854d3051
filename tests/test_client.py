"""Test the remote client against a listener served through the Flask test client."""

import pytest
import requests

from darkfs.client import RemoteClient
from darkfs.config import ClientConfig
from darkfs.errors import ConfigurationError, DecryptionError, NotFoundError, RemoteError, TransportError
from darkfs.models import DIRECTORY, FILE


@pytest.fixture
def client(client_config, crypto, session) -> RemoteClient:
	return RemoteClient(client_config, crypto, session=session)


class TestTree:
	def test_render_tree(self, client) -> None:
		assert client.render_tree() == (
			"docs\n"
			"├── empty\n"
			"├── notes\n"
			"|   ├── a.txt\n"
			"|   └── b.txt\n"
			"└── readme.txt"
		)

	def test_tree_root(self, client) -> None:
		assert client.tree().root_directory() == "docs"

	def test_wrong_key(self, client_config, other_crypto, session) -> None:
		with pytest.raises(DecryptionError):
			RemoteClient(client_config, other_crypto, session=session).tree()

	def test_exists_and_is_directory(self, client) -> None:
		assert client.exists("docs/notes/a.txt")
		assert not client.exists("docs/notes/c.txt")
		assert client.is_directory("docs/empty")
		assert not client.is_directory("docs/readme.txt")

	def test_is_directory_unknown(self, client) -> None:
		with pytest.raises(NotFoundError):
			client.is_directory("docs/nope")


class TestCat:
	def test_returns_plaintext(self, client) -> None:
		assert client.cat("docs/notes/b.txt") == b"beta\n"

	def test_sends_darkened_name(self, client, session, crypto) -> None:
		client.cat("docs/readme.txt")
		method, url, kwargs = session.calls[-1]
		assert (method, url) == ("POST", "http://listener.test/cat")
		assert kwargs["json"] == {"name": crypto.darken_path("docs/readme.txt")}

	def test_unknown_file_carries_listener_message(self, client) -> None:
		with pytest.raises(RemoteError) as exc:
			client.cat("docs/missing.txt")
		assert exc.value.status == 404
		assert exc.value.body.startswith("cat: no such resource")

	def test_directory(self, client) -> None:
		with pytest.raises(RemoteError) as exc:
			client.cat("docs/notes")
		assert exc.value.status == 400


class TestLs:
	def test_directory_lists_children(self, client) -> None:
		result = client.ls("docs/notes")
		assert result.kind == DIRECTORY
		assert result.entries == ["docs/notes/a.txt", "docs/notes/b.txt"]
		assert result.size is None

	def test_file(self, client) -> None:
		result = client.ls("docs/readme.txt")
		assert result.kind == FILE
		assert result.entries == ["docs/readme.txt"]
		assert result.size == len(b"read me first\n")

	def test_unknown_name(self, client) -> None:
		with pytest.raises(NotFoundError) as exc:
			client.ls("docs/missing")
		assert "no such resource" in str(exc.value)


class TestRequests:
	def test_endpoints(self, client) -> None:
		assert client.endpoints() == ["endpoints", "ls", "tree", "cat"]

	def test_timeouts_are_explicit(self, client, session) -> None:
		client.endpoints()
		_, _, kwargs = session.calls[-1]
		assert kwargs["timeout"] == (1.5, 7.0)

	def test_missing_remote_url(self, crypto, session) -> None:
		client = RemoteClient(ClientConfig(), crypto, session=session)
		with pytest.raises(ConfigurationError):
			client.tree()
		assert session.calls == []

	def test_remote_url_needs_trailing_slash(self, crypto, session) -> None:
		client = RemoteClient(ClientConfig(remote_url="http://listener.test"), crypto, session=session)
		with pytest.raises(ConfigurationError):
			client.endpoints()

	def test_connection_failure(self, client_config, crypto) -> None:
		class DownSession:
			def request(self, method, url, **kwargs):
				raise requests.ConnectionError("connection refused")

		client = RemoteClient(client_config, crypto, session=DownSession())
		with pytest.raises(TransportError):
			client.tree()
