import django.core.validators
import django.db.models.deletion
import uuid
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
            name='Payout',
            fields=[
                ('payout_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('psychologist_name', models.CharField(max_length=255, verbose_name='psychologist name')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='amount')),
                ('status', models.CharField(choices=[('Processando', 'Processing'), ('Pago', 'Paid'), ('Rejeitado', 'Rejected')], default='Processando', max_length=20, verbose_name='status')),
                ('requested_at', models.DateTimeField(auto_now_add=True, verbose_name='requested at')),
                ('processed_at', models.DateTimeField(blank=True, null=True, verbose_name='processed at')),
                ('psychologist', models.ForeignKey(help_text='Psychologist withdrawing the balance', on_delete=django.db.models.deletion.PROTECT, related_name='payouts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Payout',
                'verbose_name_plural': 'Payouts',
                'db_table': 'payouts',
                'ordering': ['-requested_at'],
                'indexes': [
                    models.Index(fields=['psychologist', 'status'], name='payouts_psychol_5e1a9c_idx'),
                    models.Index(fields=['status'], name='payouts_status_b7d204_idx'),
                ],
            },
        ),
    ]
