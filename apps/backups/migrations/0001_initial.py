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
            name='BackupRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('filename', models.CharField(max_length=100)),
                ('scope', models.CharField(choices=[('apartment', 'Apartment'), ('all', 'Full system')], max_length=20)),
                ('apartment_id', models.CharField(blank=True, db_index=True, max_length=50)),
                ('include_deleted', models.BooleanField(default=False)),
                ('encrypted', models.BooleanField(default=False)),
                ('collections', models.JSONField(default=list)),
                ('size', models.PositiveBigIntegerField(default=0)),
                ('created_by_username', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='backups', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'backup_history',
                'ordering': ['-created_at'],
            },
        ),
    ]
