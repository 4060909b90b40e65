import base64

import pytest

from apps.backups.crypto import decrypt_payload, encrypt_payload
from apps.backups.exceptions import DecryptionError
from apps.backups.models import format_bytes


# =============================================================================
# Encryption
# =============================================================================

class TestBackupEncryption:

    def test_round_trip(self):
        blob = encrypt_payload('{"metadata": {}, "data": {}}', 'backup-pass')
        assert decrypt_payload(blob, 'backup-pass') == '{"metadata": {}, "data": {}}'

    def test_round_trip_keeps_arabic_text(self):
        blob = encrypt_payload('{"name": "السوق الطازج"}', 'backup-pass')
        assert decrypt_payload(blob, 'backup-pass') == '{"name": "السوق الطازج"}'

    def test_each_encryption_is_different(self):
        assert encrypt_payload('same', 'backup-pass') != encrypt_payload('same', 'backup-pass')

    def test_layout_is_salt_nonce_ciphertext(self):
        raw = base64.b64decode(encrypt_payload('abc', 'backup-pass'))
        # 16 salt + 12 nonce + 3 ciphertext + 16 tag
        assert len(raw) == 47

    def test_wrong_password(self):
        blob = encrypt_payload('secret data', 'backup-pass')

        with pytest.raises(DecryptionError, match='wrong password'):
            decrypt_payload(blob, 'other-pass')

    def test_tampered_ciphertext(self):
        raw = bytearray(base64.b64decode(encrypt_payload('secret data', 'backup-pass')))
        raw[-1] ^= 0x01

        with pytest.raises(DecryptionError):
            decrypt_payload(base64.b64encode(bytes(raw)).decode(), 'backup-pass')

    def test_not_base64(self):
        with pytest.raises(DecryptionError, match='base64'):
            decrypt_payload('not base64 at all!', 'backup-pass')

    def test_truncated(self):
        with pytest.raises(DecryptionError, match='truncated'):
            decrypt_payload(base64.b64encode(b'\x00' * 20).decode(), 'backup-pass')


# =============================================================================
# Size formatting
# =============================================================================

@pytest.mark.parametrize('size, expected', [
    (0, '0 Bytes'),
    (512, '512 Bytes'),
    (1024, '1 KB'),
    (1536, '1.5 KB'),
    (1024 * 1024, '1 MB'),
    (5 * 1024 ** 3, '5 GB'),
    (2048 * 1024 ** 3, '2048 GB'),
])
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected
