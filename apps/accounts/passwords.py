"""
Password credential manager.

Credentials are self-describing strings of the form::

    <derived_key_hex>:<salt_hex>:<iterations>

The key is derived with PBKDF2-HMAC-SHA256 and a random per-credential
salt. Because the salt and iteration count travel with the credential,
raising ``PASSWORD_HASH_ITERATIONS`` never invalidates stored passwords.

Example::

    from apps.accounts.passwords import create_hash, verify_password

    credential = create_hash('S3cure!Pass')
    verify_password('S3cure!Pass', credential)   # True
    verify_password('wrong', credential)         # False
    verify_password('S3cure!Pass', 'abc:def')    # raises InvalidHashFormatError

Strength scoring (``check_password_strength``) is advisory only; callers
enforce the minimum score through PasswordStrengthValidator.
"""

from dataclasses import dataclass, field
import hmac
import re
import secrets
import string
from typing import List, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from django.conf import settings


DELIMITER = ':'
KEY_LENGTH = 32
DEFAULT_ITERATIONS = 100_000
DEFAULT_SALT_BYTES = 32
MIN_SALT_BYTES = 16

STRENGTH_LABELS = [
    (6, 'Very Strong'),
    (4, 'Strong'),
    (3, 'Medium'),
    (2, 'Weak'),
]


class InvalidHashFormatError(ValueError):
    """Raised when a stored credential cannot be parsed."""
    pass


@dataclass
class PasswordStrength:
    score: int
    strength: str
    feedback: List[str] = field(default_factory=list)

    def as_dict(self):
        return {
            'score': self.score,
            'strength': self.strength,
            'feedback': list(self.feedback),
        }


def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode('utf-8'))


def create_hash(password: str, iterations: Optional[int] = None) -> str:
    """
    Hash a password into a ``key:salt:iterations`` credential.

    Args:
        password: Plain text password
        iterations: PBKDF2 iteration count (defaults to PASSWORD_HASH_ITERATIONS)

    Returns:
        Credential string; two calls with the same password differ.
    """
    if iterations is None:
        iterations = getattr(settings, 'PASSWORD_HASH_ITERATIONS', DEFAULT_ITERATIONS)
    salt_bytes = max(getattr(settings, 'PASSWORD_SALT_BYTES', DEFAULT_SALT_BYTES), MIN_SALT_BYTES)

    salt = secrets.token_bytes(salt_bytes)
    key = _derive_key(password, salt, iterations)
    return DELIMITER.join([key.hex(), salt.hex(), str(iterations)])


def parse_hash(credential: str):
    """
    Split a credential into (key_hex, salt, iterations).

    Raises:
        InvalidHashFormatError: If any field is missing or unparseable
    """
    parts = (credential or '').split(DELIMITER)
    if len(parts) != 3 or not all(parts):
        raise InvalidHashFormatError('Invalid hash format')

    key_hex, salt_hex, iterations = parts
    try:
        salt = bytes.fromhex(salt_hex)
        iterations = int(iterations)
    except ValueError:
        raise InvalidHashFormatError('Invalid hash format')

    if iterations <= 0:
        raise InvalidHashFormatError('Invalid hash format')

    return key_hex.lower(), salt, iterations


def verify_password(password: str, credential: str) -> bool:
    """
    Check a password against a stored credential.

    Returns:
        True on match, False on a wrong password

    Raises:
        InvalidHashFormatError: If the credential is malformed
    """
    key_hex, salt, iterations = parse_hash(credential)
    derived = _derive_key(password or '', salt, iterations).hex()
    return hmac.compare_digest(derived, key_hex)


def check_password_strength(password: str) -> PasswordStrength:
    """Score a password 0-7 from length and character-class checks."""
    if not password:
        return PasswordStrength(0, 'Very Weak', ['Password cannot be empty'])

    score = 0
    feedback = []

    if len(password) >= 8:
        score += 1
    else:
        feedback.append('Password should be at least 8 characters')

    checks = [
        (r'[a-z]', 'Include lowercase letters'),
        (r'[A-Z]', 'Include uppercase letters'),
        (r'[0-9]', 'Include numbers'),
        (r'[^a-zA-Z0-9]', 'Include special characters'),
    ]
    for pattern, hint in checks:
        if re.search(pattern, password):
            score += 1
        else:
            feedback.append(hint)

    if len(password) >= 12:
        score += 1
    if len(password) >= 16:
        score += 1

    strength = 'Very Weak'
    for threshold, label in STRENGTH_LABELS:
        if score >= threshold:
            strength = label
            break

    return PasswordStrength(score, strength, feedback or ['Password is strong'])


def generate_password(length: int = 10) -> str:
    """Random password containing every character class."""
    specials = '!@#$%^&*'
    alphabet = string.ascii_letters + string.digits + specials
    required = [
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.digits),
        secrets.choice(specials),
    ]
    chars = required + [secrets.choice(alphabet) for _ in range(max(length - len(required), 0))]
    secrets.SystemRandom().shuffle(chars)
    return ''.join(chars)
