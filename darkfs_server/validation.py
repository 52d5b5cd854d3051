"""
Strict JSON body decoding for body-bearing verbs.

Every rejection carries its own status and message so clients can tell a
wrong media type from an oversize body from a malformed one.
"""

import json
import logging
from dataclasses import fields
from typing import Type, TypeVar

from flask import Request
from werkzeug.exceptions import RequestEntityTooLarge

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MalformedRequest(Exception):
	"""Raised when a request body is rejected; maps to a 4xx answer."""
	def __init__(self, status: int, msg: str):
		self.status = status
		self.msg = msg
		super().__init__(msg)


class UnsupportedMediaType(MalformedRequest):
	def __init__(self):
		super().__init__(415, "Content-Type header is not application/json")


class PayloadTooLarge(MalformedRequest):
	def __init__(self):
		super().__init__(413, "Request body must not be larger than 1MB")


def _read_body(request: Request, limit: int) -> bytes:
	if request.content_length is not None and request.content_length > limit:
		raise PayloadTooLarge()
	try:
		data = request.stream.read(limit + 1)
	except RequestEntityTooLarge as e:
		raise PayloadTooLarge() from e
	if len(data) > limit:
		raise PayloadTooLarge()
	return data


def decode_json_body(request: Request, body_cls: Type[T], limit: int) -> T:
	"""
	Decode the request body into `body_cls`, a dataclass whose fields are all
	required strings. Raises MalformedRequest for anything the client got
	wrong; any other failure propagates as an internal error.
	"""
	if request.headers.get("Content-Type"):
		if request.mimetype != "application/json":
			raise UnsupportedMediaType()

	text = _read_body(request, limit).decode("utf-8")
	if not text.strip():
		raise MalformedRequest(400, "Request body must not be empty")

	decoder = json.JSONDecoder()
	start = len(text) - len(text.lstrip())
	try:
		value, end = decoder.raw_decode(text, start)
	except json.JSONDecodeError as e:
		if e.pos >= len(text.rstrip()):
			raise MalformedRequest(400, "Request body contains badly-formed JSON")
		raise MalformedRequest(400, f"Request body contains badly-formed JSON (at position {e.pos})")

	expected = {f.name for f in fields(body_cls)}
	if not isinstance(value, dict):
		raise MalformedRequest(400, f"Request body contains an invalid value (at position {start})")
	for key, item in value.items():
		if key not in expected:
			raise MalformedRequest(400, f"Request body contains unknown field \"{key}\"")
		if not isinstance(item, str):
			raise MalformedRequest(400, f"Request body contains an invalid value for the \"{key}\" field")

	# Decoding one value leaves {..JSON1..}{..JSON2..} undetected
	if text[end:].strip():
		raise MalformedRequest(400, "Request body must only contain a single JSON object")

	for name in sorted(expected):
		if name not in value:
			raise MalformedRequest(400, f"Request body is missing the \"{name}\" field")

	return body_cls(**value)
