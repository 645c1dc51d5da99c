import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def rate_field(help_text):
    return models.DecimalField(
        blank=True,
        decimal_places=4,
        help_text=help_text,
        max_digits=7,
        null=True,
        validators=[django.core.validators.MinValueValidator(0)],
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Company',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('tax_id', models.CharField(blank=True, max_length=20, null=True)),
                (
                    'tax_regime',
                    models.CharField(
                        choices=[
                            ('simples_nacional', 'Simples Nacional'),
                            ('lucro_presumido', 'Lucro Presumido'),
                            ('lucro_real', 'Lucro Real'),
                        ],
                        default='simples_nacional',
                        max_length=20,
                    ),
                ),
                (
                    'fiscal_period',
                    models.CharField(
                        choices=[('monthly', 'Mensal'), ('quarterly', 'Trimestral'), ('yearly', 'Anual')],
                        default='monthly',
                        max_length=20,
                    ),
                ),
                (
                    'owner',
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='companies',
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                'db_table': 'company',
                'ordering': ['name'],
                'verbose_name_plural': 'companies',
            },
        ),
        migrations.CreateModel(
            name='TaxConfiguration',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                (
                    'use_das',
                    models.BooleanField(
                        default=False,
                        help_text='Simples Nacional: apenas o DAS incide sobre a receita bruta.',
                    ),
                ),
                ('das_rate', rate_field('Alíquota do DAS (padrão 0.06).')),
                ('icms_rate', rate_field('Alíquota de ICMS (padrão 0.18).')),
                ('ipi_rate', rate_field('Alíquota de IPI (padrão 0.10).')),
                ('pis_rate', rate_field('Alíquota de PIS (padrão 0.0165).')),
                ('cofins_rate', rate_field('Alíquota de COFINS (padrão 0.076).')),
                ('iss_rate', rate_field('Alíquota de ISS (padrão 0.05).')),
                ('irpj_rate', rate_field('Alíquota de IRPJ (padrão 0.15).')),
                ('irpj_additional_rate', rate_field('Adicional de IRPJ (padrão 0.10).')),
                (
                    'irpj_additional_threshold',
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text='Valor do LAIR a partir do qual incide o adicional (padrão 20000).',
                        max_digits=15,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ('csll_rate', rate_field('Alíquota de CSLL (padrão 0.09).')),
                (
                    'company',
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='tax_configuration',
                        to='companies.company',
                    ),
                ),
            ],
            options={
                'db_table': 'tax_configuration',
            },
        ),
    ]
