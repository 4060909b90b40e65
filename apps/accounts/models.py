from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import RegexValidator
from django.db import models
import uuid

from .passwords import create_hash, verify_password


class UserRole(models.TextChoices):
    """Fixed set of roles; visibility is decided by apps.accounts.policy."""
    SYSTEM_ADMIN = 'system_admin', 'System Admin'
    APARTMENT_ADMIN = 'apartment_admin', 'Apartment Admin'
    APARTMENT_USER = 'apartment_user', 'Apartment User'


class Language(models.TextChoices):
    ENGLISH = 'en', 'English'
    ARABIC = 'ar', 'Arabic'


username_validator = RegexValidator(
    regex=r'^[a-zA-Z0-9_]+$',
    message='Username can only contain letters, numbers, and underscores',
)


class UserManager(BaseUserManager):
    """Custom user manager for username-based authentication."""

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError('Username is required')

        email = extra_fields.pop('email', '')
        user = self.model(
            username=username,
            email=self.normalize_email(email) if email else '',
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.SYSTEM_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model with username authentication.

    The ``password`` column holds a ``key:salt:iterations`` credential
    produced by apps.accounts.passwords, which is the only credential
    checked at login.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(
        max_length=50,
        unique=True,
        validators=[username_validator],
    )
    email = models.EmailField(max_length=255, blank=True)
    english_name = models.CharField(max_length=100, blank=True)
    arabic_name = models.CharField(max_length=100, blank=True)

    # Tenant scoping
    apartment_id = models.CharField(max_length=50, blank=True, db_index=True)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.APARTMENT_USER,
    )
    preferred_language = models.CharField(
        max_length=2,
        choices=Language.choices,
        default=Language.ENGLISH,
    )

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)
    password_changed_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        ordering = ['username']
        indexes = [
            models.Index(fields=['apartment_id', 'role'], name='users_apartment_role_idx'),
            models.Index(fields=['created_at'], name='users_created_at_idx'),
        ]

    def __str__(self):
        return self.username

    def set_password(self, raw_password):
        if raw_password is None:
            self.set_unusable_password()
            return
        self.password = create_hash(raw_password)
        self._password = raw_password

    def check_password(self, raw_password):
        """
        Verify against the stored credential.

        Raises InvalidHashFormatError when the stored credential is malformed.
        """
        if not self.has_usable_password():
            return False
        return verify_password(raw_password, self.password)

    def get_display_name(self, language='en'):
        """Return the name for the given language, falling back to username."""
        if language == Language.ARABIC and self.arabic_name:
            return self.arabic_name
        return self.english_name or self.arabic_name or self.username

    @property
    def is_system_admin(self):
        return self.role == UserRole.SYSTEM_ADMIN

    @property
    def is_apartment_admin(self):
        return self.role == UserRole.APARTMENT_ADMIN
