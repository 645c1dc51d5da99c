import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Company(TimeStampedModel):
    """
    Modelo de empresa (multi-tenant).

    Toda transação, categoria, cliente e meta pertence a exatamente uma empresa,
    e toda empresa pertence a exatamente um usuário (owner).
    """

    class TaxRegimes(models.TextChoices):
        SIMPLES_NACIONAL = "simples_nacional", "Simples Nacional"
        LUCRO_PRESUMIDO = "lucro_presumido", "Lucro Presumido"
        LUCRO_REAL = "lucro_real", "Lucro Real"

    class FiscalPeriods(models.TextChoices):
        MONTHLY = "monthly", "Mensal"
        QUARTERLY = "quarterly", "Trimestral"
        YEARLY = "yearly", "Anual"

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="companies",
    )
    name = models.CharField(max_length=255)
    tax_id = models.CharField(max_length=20, null=True, blank=True)
    tax_regime = models.CharField(
        max_length=20,
        choices=TaxRegimes.choices,
        default=TaxRegimes.SIMPLES_NACIONAL,
    )
    fiscal_period = models.CharField(
        max_length=20,
        choices=FiscalPeriods.choices,
        default=FiscalPeriods.MONTHLY,
    )

    class Meta:
        db_table = "company"
        ordering = ["name"]
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name


def _rate_field(help_text):
    return models.DecimalField(
        max_digits=7,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text=help_text,
    )


class TaxConfiguration(TimeStampedModel):
    """
    Alíquotas por empresa. Campos nulos usam o valor padrão em
    apps.reports.tax.DEFAULT_TAX_RATES, campo a campo.
    """

    company = models.OneToOneField(
        Company,
        on_delete=models.CASCADE,
        related_name="tax_configuration",
    )
    use_das = models.BooleanField(
        default=False,
        help_text="Simples Nacional: apenas o DAS incide sobre a receita bruta.",
    )
    das_rate = _rate_field("Alíquota do DAS (padrão 0.06).")
    icms_rate = _rate_field("Alíquota de ICMS (padrão 0.18).")
    ipi_rate = _rate_field("Alíquota de IPI (padrão 0.10).")
    pis_rate = _rate_field("Alíquota de PIS (padrão 0.0165).")
    cofins_rate = _rate_field("Alíquota de COFINS (padrão 0.076).")
    iss_rate = _rate_field("Alíquota de ISS (padrão 0.05).")
    irpj_rate = _rate_field("Alíquota de IRPJ (padrão 0.15).")
    irpj_additional_rate = _rate_field("Adicional de IRPJ (padrão 0.10).")
    irpj_additional_threshold = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Valor do LAIR a partir do qual incide o adicional (padrão 20000).",
    )
    csll_rate = _rate_field("Alíquota de CSLL (padrão 0.09).")

    class Meta:
        db_table = "tax_configuration"

    def __str__(self):
        return f"Configuração tributária - {self.company}"
