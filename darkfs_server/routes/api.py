import logging
from functools import wraps
from flask import Blueprint, request, jsonify, current_app, Response

from darkfs.errors import NotFoundError, StoreError
from darkfs.models import BodyLs, BodyRead
from darkfs_server.validation import MalformedRequest, decode_json_body

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

INTERNAL_ERROR = "Internal Server Error"


def get_service():
	"""Get the query service bound to this app."""
	return current_app.config["DARKFS_SERVICE"]


def text_response(text: str, status: int = 200) -> Response:
	return Response(text, status=status, mimetype="text/plain")


def json_body(body_cls):
	"""Decorator decoding the request body into `body_cls` and passing it on."""
	def decorator(f):
		@wraps(f)
		def decorated(*args, **kwargs):
			limit = current_app.config["DARKFS_CONFIG"].max_body_size
			try:
				body = decode_json_body(request, body_cls, limit)
			except MalformedRequest as e:
				return text_response(e.msg, e.status)
			except Exception:
				logger.exception(f"Failed to decode request body for {request.path}")
				return text_response(INTERNAL_ERROR, 500)
			return f(body, *args, **kwargs)
		return decorated
	return decorator


@api_bp.errorhandler(StoreError)
def handle_store_error(e: StoreError):
	# detail stays in the server log
	logger.error(f"Store failure on {request.path}: {e}", exc_info=e)
	return text_response(INTERNAL_ERROR, 500)


@api_bp.route("/endpoints", methods=["GET"])
def endpoints():
	"""List the verbs this listener answers."""
	return text_response(get_service().endpoints())


@api_bp.route("/ls", methods=["POST"])
@json_body(BodyLs)
def remote_ls(body: BodyLs):
	"""
	Kind and ciphertext of one resource. Expects {"name": "<darkened name>"}.
	curl http://127.0.0.1:4444/ls -H "Content-Type: application/json" --data '{"name":"..."}'
	"""
	try:
		answer = get_service().ls(body.name)
	except NotFoundError:
		# Unknown names answer 200 with a message; clients check the "<kind>:" prefix
		return text_response(f"ls: no such resource {body.name}")
	return text_response(answer)


@api_bp.route("/tree", methods=["GET"])
def remote_tree():
	"""Full darkened listing of the served root."""
	resources = get_service().tree()
	return jsonify([r.to_dict() for r in resources])


@api_bp.route("/cat", methods=["POST"])
@json_body(BodyRead)
def remote_cat(body: BodyRead):
	"""Raw (still encrypted) content of a file."""
	try:
		data = get_service().cat(body.name)
	except NotFoundError:
		return text_response(f"cat: no such resource {body.name}", 404)
	except IsADirectoryError:
		return text_response(f"cat: {body.name} is a directory", 400)
	return Response(data, mimetype="application/octet-stream")
