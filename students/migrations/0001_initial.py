import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('courses', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Application',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('full_name', models.CharField(max_length=255)),
                ('email', models.EmailField(max_length=254)),
                ('mobile', models.CharField(max_length=10)),
                ('college_name', models.CharField(max_length=255)),
                ('branch', models.CharField(choices=[('CSE', 'CSE'), ('IT', 'IT'), ('ECE', 'ECE'), ('EEE', 'EEE'), ('ME', 'ME'), ('CE', 'CE'), ('Other', 'Other')], max_length=10)),
                ('year', models.CharField(choices=[('1st Year', '1st Year'), ('2nd Year', '2nd Year'), ('3rd Year', '3rd Year'), ('4th Year', '4th Year')], max_length=10)),
                ('internship_domain', models.CharField(blank=True, max_length=150, null=True)),
                ('completion_date', models.DateField(blank=True, null=True)),
                ('test_passed', models.BooleanField(blank=True, default=None, null=True)),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('under_verification', 'Under Verification'), ('completed', 'Completed'), ('failed', 'Failed'), ('refunded', 'Refunded')], db_index=True, default='pending', max_length=30)),
                ('transaction_id', models.CharField(blank=True, max_length=100, null=True)),
                ('payment_screenshot_url', models.CharField(blank=True, max_length=500, null=True)),
                ('payment_verified_at', models.DateTimeField(blank=True, null=True)),
                ('payment_verified_by', models.CharField(blank=True, max_length=150, null=True)),
                ('rejection_reason', models.TextField(blank=True, null=True)),
                ('certificate_number', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('certificate_issued_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('track', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='applications', to='courses.certificatetrack')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='applications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', 'payment_status'], name='application_user_status_idx')],
            },
        ),
    ]
