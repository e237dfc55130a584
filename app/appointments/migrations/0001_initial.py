import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TherapySession',
            fields=[
                ('session_id', models.CharField(editable=False, help_text='Deterministic identifier derived from psychologist and slot', max_length=128, primary_key=True, serialize=False)),
                ('patient_name', models.CharField(max_length=255, verbose_name='patient name')),
                ('psychologist_name', models.CharField(max_length=255, verbose_name='psychologist name')),
                ('session_timestamp', models.DateTimeField(help_text='Start of the booked one-hour slot', verbose_name='session start')),
                ('status', models.CharField(choices=[('Pago', 'Paid'), ('Agendada', 'Scheduled'), ('Concluída', 'Completed'), ('Cancelada', 'Cancelled')], default='Pago', max_length=20, verbose_name='status')),
                ('rate', models.DecimalField(decimal_places=2, help_text='Amount captured by the payment gateway', max_digits=10, verbose_name='rate')),
                ('payment_id', models.CharField(blank=True, help_text='Gateway payment identifier', max_length=64, verbose_name='payment id')),
                ('payment_status', models.CharField(blank=True, max_length=30, verbose_name='payment status')),
                ('payment_method', models.CharField(blank=True, max_length=50, verbose_name='payment method')),
                ('reviewed', models.BooleanField(default=False, verbose_name='reviewed')),
                ('rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)], verbose_name='rating')),
                ('review_comment', models.TextField(blank=True, verbose_name='review comment')),
                ('psychologist_note', models.TextField(blank=True, help_text='Private note kept by the psychologist', verbose_name='psychologist note')),
                ('effective_duration_in_seconds', models.PositiveIntegerField(default=0, help_text='Time spent in the video room, in seconds', verbose_name='effective duration')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('patient', models.ForeignKey(help_text='Patient who booked and paid for the session', on_delete=django.db.models.deletion.PROTECT, related_name='patient_sessions', to=settings.AUTH_USER_MODEL)),
                ('psychologist', models.ForeignKey(help_text='Psychologist providing the session', on_delete=django.db.models.deletion.PROTECT, related_name='psychologist_sessions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Therapy Session',
                'verbose_name_plural': 'Therapy Sessions',
                'db_table': 'sessions',
                'indexes': [
                    models.Index(fields=['psychologist', 'session_timestamp'], name='sessions_psychol_2f6c1e_idx'),
                    models.Index(fields=['patient', 'session_timestamp'], name='sessions_patient_9b3d27_idx'),
                    models.Index(fields=['status'], name='sessions_status_41c8a0_idx'),
                ],
            },
        ),
    ]
