import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.clients.models import Client
from apps.companies.models import Company

# Convenção de nomenclatura herdada: despesas com "financeira" no nome são financeiras
FINANCIAL_NAME_MARKER = "financeira"


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        # Garantimos que regras cross-model rodem sempre
        self.full_clean()
        return super().save(*args, **kwargs)


class Category(TimeStampedModel):
    class CategoryTypes(models.TextChoices):
        REVENUE = "revenue", "Receita"
        COST = "cost", "Custo"
        EXPENSE = "expense", "Despesa"

    class CostClassifications(models.TextChoices):
        FIXED = "fixed", "Fixo"
        VARIABLE = "variable", "Variável"

    class Natures(models.TextChoices):
        OPERATIONAL = "operational", "Operacional"
        FINANCIAL = "financial", "Financeira"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="categories",
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        related_name="subcategories",
        null=True,
        blank=True,
        verbose_name="Categoria Pai",
    )
    name = models.CharField(max_length=100)
    category_type = models.CharField(max_length=10, choices=CategoryTypes.choices)
    cost_classification = models.CharField(
        max_length=10,
        choices=CostClassifications.choices,
        null=True,
        blank=True,
    )
    nature = models.CharField(
        max_length=15,
        choices=Natures.choices,
        null=True,
        blank=True,
        help_text="Operacional ou financeira. Vazio: decide pelo nome da categoria.",
    )
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "category"
        ordering = ["company__name", "display_order", "name"]
        verbose_name_plural = "categories"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "parent", "name", "category_type"],
                name="uniq_category_structure",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_category_type_display()})"

    @property
    def is_financial(self) -> bool:
        if self.nature:
            return self.nature == self.Natures.FINANCIAL
        if self.category_type != self.CategoryTypes.EXPENSE:
            return False
        return FINANCIAL_NAME_MARKER in (self.name or "").lower()

    def clean(self):
        super().clean()
        if self.category_type == self.CategoryTypes.REVENUE and self.cost_classification:
            raise ValidationError(
                {"cost_classification": "Classificação fixo/variável só se aplica a custos e despesas."}
            )
        if self.parent:
            if self.pk and self.parent_id == self.pk:
                raise ValidationError(
                    {"parent": "Uma categoria não pode ser pai dela mesma."}
                )
            if self.parent.company_id != self.company_id:
                raise ValidationError(
                    {"parent": "A categoria pai deve pertencer à mesma empresa."}
                )
            if self.parent.parent_id:
                raise ValidationError(
                    {"parent": "Apenas um nível de subcategoria é permitido."}
                )
            if self.parent.category_type != self.category_type:
                raise ValidationError(
                    {
                        "category_type": f"A subcategoria deve ser do tipo {self.parent.get_category_type_display()}, igual à categoria pai."
                    }
                )

    def save(self, *args, **kwargs):
        if (
            self._state.adding
            and not self.nature
            and self.category_type == self.CategoryTypes.EXPENSE
        ):
            self.nature = (
                self.Natures.FINANCIAL if self.is_financial else self.Natures.OPERATIONAL
            )
        super().save(*args, **kwargs)


class Transaction(TimeStampedModel):
    class TransactionTypes(models.TextChoices):
        ADMINISTRATIVE = "administrative", "Administrativa"
        OPERATIONAL = "operational", "Operacional"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        related_name="transactions",
        null=True,
        blank=True,
    )
    client = models.ForeignKey(
        Client,
        on_delete=models.SET_NULL,
        related_name="transactions",
        null=True,
        blank=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="transactions",
        null=True,
        blank=True,
    )
    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    transaction_date = models.DateField()
    month = models.PositiveSmallIntegerField(blank=True, editable=False)
    year = models.PositiveSmallIntegerField(blank=True, editable=False)
    transaction_type = models.CharField(
        max_length=20,
        choices=TransactionTypes.choices,
        default=TransactionTypes.OPERATIONAL,
    )
    is_new_client = models.BooleanField(default=False)
    is_marketing_cost = models.BooleanField(default=False)
    is_sales_cost = models.BooleanField(default=False)

    class Meta:
        db_table = "transaction"
        ordering = ["-transaction_date", "-created_at"]
        indexes = [
            models.Index(fields=["company", "year", "month"], name="transaction_company_period_idx"),
            models.Index(fields=["company", "transaction_date"], name="transaction_company_date_idx"),
        ]

    def __str__(self):
        return f"{self.description} ({self.amount})"

    def clean(self):
        super().clean()
        errors = {}
        if self.category and self.category.company_id != self.company_id:
            errors["category"] = "Category must belong to the same company."
        if self.client and self.client.company_id != self.company_id:
            errors["client"] = "Client must belong to the same company."
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if self.transaction_date:
            self.month = self.transaction_date.month
            self.year = self.transaction_date.year
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "transaction_date" in update_fields:
                kwargs["update_fields"] = {*update_fields, "month", "year"}
        super().save(*args, **kwargs)


class Goal(TimeStampedModel):
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="goals",
    )
    period_month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)],
    )
    period_year = models.PositiveSmallIntegerField()
    metric_name = models.CharField(max_length=50)
    target_value = models.DecimalField(max_digits=15, decimal_places=2)

    class Meta:
        db_table = "goal"
        ordering = ["-period_year", "-period_month", "metric_name"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "period_month", "period_year", "metric_name"],
                name="uniq_goal_company_period_metric",
            ),
        ]

    def __str__(self):
        return f"{self.metric_name} {self.period_month:02d}/{self.period_year}: {self.target_value}"
