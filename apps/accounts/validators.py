from django.conf import settings
from django.core.exceptions import ValidationError

from .passwords import check_password_strength


class PasswordStrengthValidator:
    """
    Reject passwords scoring below MIN_PASSWORD_STRENGTH.

    Registered in AUTH_PASSWORD_VALIDATORS, so serializers using
    ``validate_password`` enforce it at registration and password change.
    """

    def __init__(self, min_score=None):
        self.min_score = min_score

    def get_min_score(self):
        if self.min_score is not None:
            return self.min_score
        return getattr(settings, 'MIN_PASSWORD_STRENGTH', 3)

    def validate(self, password, user=None):
        result = check_password_strength(password)
        if result.score < self.get_min_score():
            raise ValidationError(
                'Password is too weak. %(hints)s',
                code='password_too_weak',
                params={'hints': ' '.join(result.feedback)},
            )

    def get_help_text(self):
        return 'Use upper and lower case letters, numbers and special characters.'
