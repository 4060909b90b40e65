import django.core.serializers.json
import django.db.models.deletion
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLogEntry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('action', models.CharField(choices=[
                    ('USER_REGISTERED', 'User registered'),
                    ('USER_LOGIN', 'User login'),
                    ('LOGIN_FAILED', 'Login failed'),
                    ('USER_LOGOUT', 'User logout'),
                    ('PASSWORD_CHANGED', 'Password changed'),
                    ('PASSWORD_RESET', 'Password reset'),
                    ('UPDATE_PROFILE', 'Profile updated'),
                    ('CREATE_USER', 'User created'),
                    ('UPDATE_USER', 'User updated'),
                    ('TOGGLE_USER_STATUS', 'User status toggled'),
                    ('CREATE_VENDOR', 'Vendor created'),
                    ('UPDATE_VENDOR', 'Vendor updated'),
                    ('DELETE_VENDOR', 'Vendor deleted'),
                    ('CREATE_ITEM', 'Item created'),
                    ('UPDATE_ITEM', 'Item updated'),
                    ('DELETE_ITEM', 'Item deleted'),
                    ('CREATE_PURCHASE', 'Purchase created'),
                    ('UPDATE_PURCHASE', 'Purchase updated'),
                    ('DELETE_PURCHASE', 'Purchase deleted'),
                    ('RESTORE_PURCHASE', 'Purchase restored'),
                    ('RESTORE_VENDOR', 'Vendor restored'),
                    ('RESTORE_ITEM', 'Item restored'),
                    ('DELETE_PERMANENTLY', 'Deleted permanently'),
                    ('EMPTY_TRASH', 'Trash emptied'),
                    ('CREATE_BACKUP', 'Backup created'),
                    ('RESTORE_BACKUP', 'Backup restored'),
                ], max_length=32)),
                ('target_table', models.CharField(max_length=50)),
                ('target_id', models.CharField(blank=True, max_length=64)),
                ('old_data', models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ('new_data', models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True)),
                ('performed_at', models.DateTimeField(auto_now_add=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Audit log entries',
                'db_table': 'audit_log',
                'ordering': ['-performed_at'],
                'indexes': [
                    models.Index(fields=['action', 'performed_at'], name='audit_action_date_idx'),
                    models.Index(fields=['target_table', 'target_id'], name='audit_target_idx'),
                    models.Index(fields=['performed_by', 'performed_at'], name='audit_actor_date_idx'),
                ],
            },
        ),
    ]
