import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Psychologist',
            fields=[
                ('user', models.OneToOneField(help_text='Link to the base user account', on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='psychologist_profile', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('title', models.CharField(blank=True, help_text='Professional title shown in the marketplace', max_length=150, verbose_name='title')),
                ('crp', models.CharField(blank=True, help_text='Regional Psychology Council registration, as number/state', max_length=30, verbose_name='CRP')),
                ('biography', models.TextField(blank=True, help_text='Professional biography', verbose_name='biography')),
                ('specialties', models.JSONField(blank=True, default=list, help_text="List of specialties, e.g. ['TCC', 'Ansiedade']", verbose_name='specialties')),
                ('hourly_rate', models.DecimalField(blank=True, decimal_places=2, help_text='Price of one session in BRL', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='hourly rate')),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Average review rating', max_digits=3, verbose_name='rating')),
                ('reviews_count', models.PositiveIntegerField(default=0, help_text='Number of reviews received', verbose_name='reviews count')),
                ('payout_bank', models.CharField(blank=True, max_length=100, verbose_name='bank')),
                ('payout_agency', models.CharField(blank=True, max_length=20, verbose_name='agency')),
                ('payout_account', models.CharField(blank=True, max_length=30, verbose_name='account')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
            ],
            options={
                'verbose_name': 'Psychologist',
                'verbose_name_plural': 'Psychologists',
                'db_table': 'psychologists',
                'indexes': [
                    models.Index(fields=['hourly_rate'], name='psychologis_hourly__c1a2b4_idx'),
                    models.Index(fields=['rating'], name='psychologis_rating_8d0e17_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PsychologistAvailability',
            fields=[
                ('availability_id', models.BigAutoField(help_text='Unique identifier for availability entry', primary_key=True, serialize=False)),
                ('day_of_week', models.IntegerField(help_text='Day of week: 0=Sunday, 1=Monday, 2=Tuesday, 3=Wednesday, 4=Thursday, 5=Friday, 6=Saturday', validators=[django.core.validators.MinValueValidator(0, message='Day of week must be 0-6 (0=Sunday)'), django.core.validators.MaxValueValidator(6, message='Day of week must be 0-6 (6=Saturday)')], verbose_name='day of week')),
                ('enabled', models.BooleanField(default=False, help_text='Whether the psychologist takes sessions on this day', verbose_name='enabled')),
                ('start_time', models.TimeField(help_text='Start time of the working window', verbose_name='start time')),
                ('end_time', models.TimeField(help_text='End time of the working window', verbose_name='end time')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('psychologist', models.ForeignKey(help_text='Psychologist this availability belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='availability_entries', to='psychologists.psychologist')),
            ],
            options={
                'verbose_name': 'Psychologist Availability',
                'verbose_name_plural': 'Psychologist Availabilities',
                'db_table': 'psychologist_availability',
                'ordering': ['day_of_week'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(end_time__gt=models.F('start_time')), name='end_time_after_start_time'),
                    models.UniqueConstraint(fields=('psychologist', 'day_of_week'), name='unique_psychologist_day'),
                ],
            },
        ),
    ]
