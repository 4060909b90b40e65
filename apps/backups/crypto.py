"""
Password encryption for backup files.

Layout of an encrypted backup::

    base64( salt[16] | nonce[12] | AES-GCM ciphertext+tag )

The AES-256 key is derived from the password with PBKDF2-SHA256. Salt and
nonce are fresh for every encryption. The iteration count is not stored
in the file, so changing ``BACKUP_KDF_ITERATIONS`` makes older encrypted
backups unreadable.
"""

import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from django.conf import settings

from .exceptions import DecryptionError

SALT_LENGTH = 16
NONCE_LENGTH = 12
KEY_LENGTH = 32
DEFAULT_KDF_ITERATIONS = 100_000


def _derive_key(password: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=getattr(settings, 'BACKUP_KDF_ITERATIONS', DEFAULT_KDF_ITERATIONS),
    )
    return kdf.derive(password.encode('utf-8'))


def encrypt_payload(plaintext: str, password: str) -> str:
    """Encrypt a JSON document; returns base64 text."""
    salt = os.urandom(SALT_LENGTH)
    nonce = os.urandom(NONCE_LENGTH)
    ciphertext = AESGCM(_derive_key(password, salt)).encrypt(
        nonce, plaintext.encode('utf-8'), None
    )
    return base64.b64encode(salt + nonce + ciphertext).decode('ascii')


def decrypt_payload(blob: str, password: str) -> str:
    """
    Reverse of encrypt_payload.

    Raises:
        DecryptionError: If the blob is malformed, the password is wrong
            or the ciphertext was modified
    """
    try:
        raw = base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError):
        raise DecryptionError('Encrypted backup is not valid base64')

    if len(raw) <= SALT_LENGTH + NONCE_LENGTH:
        raise DecryptionError('Encrypted backup is truncated')

    salt = raw[:SALT_LENGTH]
    nonce = raw[SALT_LENGTH:SALT_LENGTH + NONCE_LENGTH]
    ciphertext = raw[SALT_LENGTH + NONCE_LENGTH:]

    try:
        plaintext = AESGCM(_derive_key(password, salt)).decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise DecryptionError('Decryption failed: wrong password or corrupted file')

    try:
        return plaintext.decode('utf-8')
    except UnicodeDecodeError:
        raise DecryptionError('Decrypted backup is not valid UTF-8')
