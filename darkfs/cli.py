import argparse
import logging
import sys
from pathlib import Path

from .client import RemoteClient
from .config import ClientConfig, default_config_path, resolve_key
from .crypto import DarkCrypto
from .errors import DarkFSError, RemoteError, RootNotFound
from .logger import setup_logging
from .render import render_tree
from .store import ResourceStore, darken_directory
from .tree import Tree

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4444


def _client(args: argparse.Namespace) -> RemoteClient:
	config = ClientConfig.from_env()
	config.require_remote_url()
	return RemoteClient(config, DarkCrypto(resolve_key(args.key)))


def cmd_serve(args: argparse.Namespace) -> None:
	from darkfs_server import ServerConfig, run_server
	config = ServerConfig(root=Path(args.root), host=args.host, port=args.port, debug=args.debug)
	if not config.root.is_dir():
		raise RootNotFound(f"Store root does not exist: {config.root}")
	run_server(config)


def cmd_darken(args: argparse.Namespace) -> None:
	crypto = DarkCrypto(resolve_key(args.key))
	dark_root = darken_directory(Path(args.source), Path(args.dest), crypto)
	print(dark_root)


def cmd_localtree(args: argparse.Namespace) -> None:
	crypto = DarkCrypto(resolve_key(args.key))
	tree = Tree.from_resources(ResourceStore(Path(args.root)).list(), crypto)
	print(render_tree(tree))


def cmd_configremote(args: argparse.Namespace) -> None:
	path = default_config_path()
	config = ClientConfig.load(path)
	config.remote_url = args.url if args.url.endswith("/") else args.url + "/"
	config.save(path)
	print(f"Remote listener set to {config.remote_url} ({path})")


def cmd_endpoints(args: argparse.Namespace) -> None:
	config = ClientConfig.from_env()
	# endpoints needs no key
	client = RemoteClient(config, crypto=None)
	for verb in client.endpoints():
		print(verb)


def cmd_tree(args: argparse.Namespace) -> None:
	print(_client(args).render_tree())


def cmd_ls(args: argparse.Namespace) -> None:
	result = _client(args).ls(args.name)
	if result.size is not None:
		print(f"{result.name}\t{result.size} bytes")
		return
	for entry in result.entries:
		print(entry.rsplit("/", 1)[-1])


def cmd_cat(args: argparse.Namespace) -> None:
	data = _client(args).cat(args.name)
	if args.out:
		Path(args.out).write_bytes(data)
		logger.info(f"Wrote {len(data)} bytes to {args.out}")
		return
	sys.stdout.buffer.write(data)
	sys.stdout.flush()


def cmd_exists(args: argparse.Namespace) -> int:
	found = _client(args).exists(args.name)
	print("yes" if found else "no")
	return 0 if found else 1


def cmd_isdir(args: argparse.Namespace) -> int:
	is_dir = _client(args).is_directory(args.name)
	print("yes" if is_dir else "no")
	return 0 if is_dir else 1


def build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(description="Browse a filesystem whose names are stored encrypted")
	p.add_argument("--debug", action="store_true", help="Enable debug logging")
	sub = p.add_subparsers(dest="cmd", required=True)

	p_serve = sub.add_parser("serve", help="Serve a darkened store (no key needed)")
	p_serve.add_argument("root", help="Darkened root directory")
	p_serve.add_argument("--host", default=DEFAULT_HOST, help="Listener host")
	p_serve.add_argument("--port", type=int, default=DEFAULT_PORT, help="Listener port")
	p_serve.set_defaults(func=cmd_serve)

	p_darken = sub.add_parser("darken", help="Copy a plaintext directory into a darkened store")
	p_darken.add_argument("source", help="Plaintext directory")
	p_darken.add_argument("dest", help="Directory that will hold the darkened root")
	p_darken.set_defaults(func=cmd_darken)

	p_local = sub.add_parser("localtree", help="Print the tree of a local darkened store")
	p_local.add_argument("root", help="Darkened root directory")
	p_local.set_defaults(func=cmd_localtree)

	p_conf = sub.add_parser("configremote", help="Remember the remote listener URL")
	p_conf.add_argument("url", help="Listener base URL, e.g. http://127.0.0.1:4444/")
	p_conf.set_defaults(func=cmd_configremote)

	p_end = sub.add_parser("endpoints", help="List the verbs of the remote listener")
	p_end.set_defaults(func=cmd_endpoints)

	p_tree = sub.add_parser("tree", help="Print the remote tree")
	p_tree.set_defaults(func=cmd_tree)

	p_ls = sub.add_parser("ls", help="List a remote resource")
	p_ls.add_argument("name", help="Plaintext resource path")
	p_ls.set_defaults(func=cmd_ls)

	p_cat = sub.add_parser("cat", help="Print a remote file")
	p_cat.add_argument("name", help="Plaintext resource path")
	p_cat.add_argument("--out", "-o", default=None, help="Write to this file instead of stdout")
	p_cat.set_defaults(func=cmd_cat)

	p_exists = sub.add_parser("exists", help="Tell whether a remote resource exists")
	p_exists.add_argument("name", help="Plaintext resource path")
	p_exists.set_defaults(func=cmd_exists)

	p_isdir = sub.add_parser("isdir", help="Tell whether a remote resource is a directory")
	p_isdir.add_argument("name", help="Plaintext resource path")
	p_isdir.set_defaults(func=cmd_isdir)

	for sp in (p_darken, p_local, p_tree, p_ls, p_cat, p_exists, p_isdir):
		sp.add_argument("--key", "-k", default=None, help="Shared key (default: $DARKFS_KEY)")

	return p


def main(argv=None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)

	# stdout carries command output, `cat` bytes included
	setup_logging(level=logging.DEBUG if args.debug else logging.INFO, stream=sys.stderr)

	try:
		status = args.func(args)
	except KeyboardInterrupt:
		logging.info("Shutting down...")
		return 130
	except RemoteError as e:
		# the listener's own message is the most useful thing to show
		print(e.body.rstrip())
		return 1
	except (DarkFSError, FileExistsError) as e:
		logger.debug("Command failed", exc_info=True)
		print(f"[!] {e}")
		return 1
	return status or 0


if __name__ == "__main__":
	sys.exit(main())
