import pytest
import string
from django.core.exceptions import ValidationError

from apps.accounts.passwords import (
    InvalidHashFormatError,
    check_password_strength,
    create_hash,
    generate_password,
    parse_hash,
    verify_password,
)
from apps.accounts.validators import PasswordStrengthValidator


# =============================================================================
# Credential Format Tests
# =============================================================================

class TestCreateHash:
    """Tests for create_hash()"""

    def test_credential_has_three_fields(self, settings):
        """Credential is key:salt:iterations."""
        credential = create_hash('S3cure!Pass')
        key_hex, salt_hex, iterations = credential.split(':')

        assert len(key_hex) == 64
        assert len(salt_hex) == settings.PASSWORD_SALT_BYTES * 2
        assert int(iterations) == settings.PASSWORD_HASH_ITERATIONS

    def test_same_password_gives_different_credentials(self):
        """A fresh salt is drawn for every credential."""
        assert create_hash('S3cure!Pass') != create_hash('S3cure!Pass')

    def test_explicit_iterations_are_stored(self):
        credential = create_hash('S3cure!Pass', iterations=1234)
        assert credential.endswith(':1234')

    def test_salt_is_never_shorter_than_sixteen_bytes(self, settings):
        settings.PASSWORD_SALT_BYTES = 4
        _, salt, _ = parse_hash(create_hash('S3cure!Pass'))
        assert len(salt) == 16


# =============================================================================
# Verification Tests
# =============================================================================

class TestVerifyPassword:
    """Tests for verify_password()"""

    def test_correct_password(self):
        credential = create_hash('S3cure!Pass')
        assert verify_password('S3cure!Pass', credential) is True

    def test_wrong_password(self):
        credential = create_hash('S3cure!Pass')
        assert verify_password('s3cure!pass', credential) is False

    def test_credential_from_other_iteration_count_still_verifies(self, settings):
        """Iterations travel with the credential."""
        credential = create_hash('S3cure!Pass', iterations=500)
        settings.PASSWORD_HASH_ITERATIONS = 2000
        assert verify_password('S3cure!Pass', credential) is True

    def test_uppercase_key_hex_is_accepted(self):
        key_hex, salt_hex, iterations = create_hash('S3cure!Pass').split(':')
        credential = ':'.join([key_hex.upper(), salt_hex, iterations])
        assert verify_password('S3cure!Pass', credential) is True

    @pytest.mark.parametrize('credential', [
        '',
        'abc:def',
        'a:b:c:d',
        'abcd::1000',
        'abcd:00ff:',
        'abcd:xyz:1000',
        'abcd:00ff:ten',
        'abcd:00ff:0',
        'abcd:00ff:-5',
    ])
    def test_malformed_credential_raises(self, credential):
        with pytest.raises(InvalidHashFormatError, match='Invalid hash format'):
            verify_password('S3cure!Pass', credential)


# =============================================================================
# Strength Tests
# =============================================================================

class TestPasswordStrength:
    """Tests for check_password_strength()"""

    def test_empty_password(self):
        result = check_password_strength('')
        assert result.score == 0
        assert result.strength == 'Very Weak'
        assert result.feedback == ['Password cannot be empty']

    def test_short_lowercase_password(self):
        result = check_password_strength('abc')
        assert result.score == 1
        assert result.strength == 'Very Weak'
        assert 'Password should be at least 8 characters' in result.feedback
        assert 'Include uppercase letters' in result.feedback

    def test_medium_password(self):
        result = check_password_strength('abcdefg1')
        assert result.score == 3
        assert result.strength == 'Medium'

    def test_strong_password(self):
        result = check_password_strength('Password1!')
        assert result.score == 5
        assert result.strength == 'Strong'
        assert result.feedback == ['Password is strong']

    def test_very_strong_password(self):
        result = check_password_strength('Very$trongPassw0rd!')
        assert result.score == 7
        assert result.strength == 'Very Strong'

    def test_length_bonus_at_twelve(self):
        assert check_password_strength('aaaaaaaaaaaa').score == 3


class TestGeneratePassword:
    """Tests for generate_password()"""

    def test_default_length(self):
        assert len(generate_password()) == 10

    def test_contains_every_character_class(self):
        for _ in range(20):
            password = generate_password(8)
            assert any(c in string.ascii_lowercase for c in password)
            assert any(c in string.ascii_uppercase for c in password)
            assert any(c in string.digits for c in password)
            assert any(c in '!@#$%^&*' for c in password)

    def test_generated_password_passes_validator(self):
        PasswordStrengthValidator().validate(generate_password())


class TestPasswordStrengthValidator:

    def test_rejects_weak_password(self):
        with pytest.raises(ValidationError) as exc_info:
            PasswordStrengthValidator().validate('abc')
        assert exc_info.value.error_list[0].code == 'password_too_weak'

    def test_min_score_override(self):
        PasswordStrengthValidator(min_score=1).validate('abc')
