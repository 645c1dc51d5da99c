import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ('clients', '0001_initial'),
        ('companies', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100)),
                (
                    'category_type',
                    models.CharField(
                        choices=[('revenue', 'Receita'), ('cost', 'Custo'), ('expense', 'Despesa')],
                        max_length=10,
                    ),
                ),
                (
                    'cost_classification',
                    models.CharField(
                        blank=True,
                        choices=[('fixed', 'Fixo'), ('variable', 'Variável')],
                        max_length=10,
                        null=True,
                    ),
                ),
                (
                    'nature',
                    models.CharField(
                        blank=True,
                        choices=[('operational', 'Operacional'), ('financial', 'Financeira')],
                        help_text='Operacional ou financeira. Vazio: decide pelo nome da categoria.',
                        max_length=15,
                        null=True,
                    ),
                ),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                (
                    'company',
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='categories',
                        to='companies.company',
                    ),
                ),
                (
                    'parent',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='subcategories',
                        to='financials.category',
                        verbose_name='Categoria Pai',
                    ),
                ),
            ],
            options={
                'db_table': 'category',
                'ordering': ['company__name', 'display_order', 'name'],
                'verbose_name_plural': 'categories',
            },
        ),
        migrations.AddConstraint(
            model_name='category',
            constraint=models.UniqueConstraint(
                fields=('company', 'parent', 'name', 'category_type'),
                name='uniq_category_structure',
            ),
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('description', models.CharField(max_length=255)),
                (
                    'amount',
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=15,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ('transaction_date', models.DateField()),
                ('month', models.PositiveSmallIntegerField(blank=True, editable=False)),
                ('year', models.PositiveSmallIntegerField(blank=True, editable=False)),
                (
                    'transaction_type',
                    models.CharField(
                        choices=[('administrative', 'Administrativa'), ('operational', 'Operacional')],
                        default='operational',
                        max_length=20,
                    ),
                ),
                ('is_new_client', models.BooleanField(default=False)),
                ('is_marketing_cost', models.BooleanField(default=False)),
                ('is_sales_cost', models.BooleanField(default=False)),
                (
                    'category',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name='transactions',
                        to='financials.category',
                    ),
                ),
                (
                    'client',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name='transactions',
                        to='clients.client',
                    ),
                ),
                (
                    'company',
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='transactions',
                        to='companies.company',
                    ),
                ),
                (
                    'created_by',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name='transactions',
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                'db_table': 'transaction',
                'ordering': ['-transaction_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['company', 'year', 'month'], name='transaction_company_period_idx'),
                    models.Index(fields=['company', 'transaction_date'], name='transaction_company_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Goal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                (
                    'period_month',
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(12),
                        ]
                    ),
                ),
                ('period_year', models.PositiveSmallIntegerField()),
                ('metric_name', models.CharField(max_length=50)),
                ('target_value', models.DecimalField(decimal_places=2, max_digits=15)),
                (
                    'company',
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='goals',
                        to='companies.company',
                    ),
                ),
            ],
            options={
                'db_table': 'goal',
                'ordering': ['-period_year', '-period_month', 'metric_name'],
            },
        ),
        migrations.AddConstraint(
            model_name='goal',
            constraint=models.UniqueConstraint(
                fields=('company', 'period_month', 'period_year', 'metric_name'),
                name='uniq_goal_company_period_metric',
            ),
        ),
    ]
