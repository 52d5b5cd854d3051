import os
import base64
import binascii
from typing import List, Optional
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, AESSIV
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.backends import default_backend
import logging

from .errors import CorruptDataError, DecryptionError, InvalidPathError

logger = logging.getLogger(__name__)

SEPARATOR = "/"


class DarkCrypto:
	"""
	Cipher adapter shared by every darkfs component that holds the key.

	Names are "darkened" segment by segment with AES-SIV so the result is
	deterministic in (path, key) and keeps the shape of a path: a listener
	can use darkened names as file names and lookup keys without ever
	decrypting them. Each segment is bound to the plaintext of the segments
	before it, so equal names under different parents do not collide.

	File content uses AES-256-GCM with a random nonce.
	"""
	NONCE_SIZE = 12      # 96 bits for AES-GCM
	TAG_SIZE = 16
	SIV_KEY_SIZE = 64    # AES-256-SIV takes a double-length key
	CONTENT_KEY_SIZE = 32
	ITERATIONS = 100000
	DEFAULT_SALT = b"darkfs/v1/shared-key"

	def __init__(self, key: str, salt: Optional[bytes] = None, iterations: Optional[int] = None):
		if not key:
			raise ValueError("Key must not be empty")
		self.salt = salt if salt else self.DEFAULT_SALT
		self.iterations = iterations if iterations else self.ITERATIONS
		self._name_key, self._content_key = self._derive_keys(key)

	def _derive_keys(self, key: str):
		"""Derive the name key and the content key from the shared key using PBKDF2-SHA256."""
		kdf = PBKDF2HMAC(
			algorithm=hashes.SHA256(),
			length=self.SIV_KEY_SIZE + self.CONTENT_KEY_SIZE,
			salt=self.salt,
			iterations=self.iterations,
			backend=default_backend()
		)
		material = kdf.derive(key.encode('utf-8'))
		return material[:self.SIV_KEY_SIZE], material[self.SIV_KEY_SIZE:]

	@staticmethod
	def split_path(path: str) -> List[str]:
		segments = path.split(SEPARATOR)
		if any(not s for s in segments):
			raise InvalidPathError(f"Invalid path (empty segment): {path!r}")
		return segments

	@staticmethod
	def _b64encode(data: bytes) -> str:
		# URL-safe alphabet never produces "/", so segments stay segments
		return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')

	@staticmethod
	def _b64decode(token: str) -> bytes:
		padding = 4 - (len(token) % 4)
		if padding != 4:
			token += '=' * padding
		try:
			return base64.urlsafe_b64decode(token.encode('ascii'))
		except (binascii.Error, UnicodeEncodeError) as e:
			raise CorruptDataError(f"Invalid ciphertext encoding: {e}") from e

	def darken_path(self, path: str) -> str:
		"""Encrypt a plaintext path into a path-shaped ciphertext."""
		siv = AESSIV(self._name_key)
		darkened = []
		prefix = ""
		for segment in self.split_path(path):
			aad = [prefix.encode('utf-8')] if prefix else None
			darkened.append(self._b64encode(siv.encrypt(segment.encode('utf-8'), aad)))
			prefix = f"{prefix}{SEPARATOR}{segment}" if prefix else segment
		return SEPARATOR.join(darkened)

	def restore_path(self, darkened: str) -> str:
		"""
		Decrypt a darkened path.
		Raises DecryptionError on a wrong key or tampered name, CorruptDataError
		when the token is not a darkened path at all.
		"""
		siv = AESSIV(self._name_key)
		try:
			tokens = self.split_path(darkened)
		except ValueError as e:
			raise CorruptDataError(str(e)) from e

		prefix = ""
		for token in tokens:
			data = self._b64decode(token)
			if len(data) <= self.TAG_SIZE:
				raise CorruptDataError("Invalid darkened segment: too short")
			aad = [prefix.encode('utf-8')] if prefix else None
			try:
				plain = siv.decrypt(data, aad)
			except InvalidTag as e:
				raise DecryptionError("Name does not decrypt under this key") from e
			try:
				segment = plain.decode('utf-8')
			except UnicodeDecodeError as e:
				raise CorruptDataError("Decrypted segment is not UTF-8") from e
			prefix = f"{prefix}{SEPARATOR}{segment}" if prefix else segment
		return prefix

	def encrypt_content(self, plaintext: bytes) -> bytes:
		"""
		Encrypt file content using AES-256-GCM.
		Returns: nonce (12 bytes) + ciphertext + tag (16 bytes)
		"""
		nonce = os.urandom(self.NONCE_SIZE)
		aesgcm = AESGCM(self._content_key)
		return nonce + aesgcm.encrypt(nonce, plaintext, None)

	def decrypt_content(self, data: bytes) -> bytes:
		"""
		Decrypt AES-256-GCM encrypted content.
		Input format: nonce (12 bytes) + ciphertext + tag (16 bytes)
		"""
		if len(data) < self.NONCE_SIZE + self.TAG_SIZE:
			raise CorruptDataError("Invalid encrypted data: too short")

		nonce = data[:self.NONCE_SIZE]
		ciphertext = data[self.NONCE_SIZE:]
		aesgcm = AESGCM(self._content_key)
		try:
			return aesgcm.decrypt(nonce, ciphertext, None)
		except InvalidTag as e:
			raise DecryptionError("Content does not decrypt under this key") from e
