"""
Resolução de alíquotas por empresa e cálculo das deduções sobre a receita bruta.

Uma TaxConfiguration inexistente ou parcialmente preenchida nunca é erro:
cada alíquota nula cai no padrão de DEFAULT_TAX_RATES de forma independente.
"""
import logging
from dataclasses import asdict, dataclass, fields
from decimal import Decimal

from .utils import ZERO, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxRates:
    use_das: bool = False
    das_rate: Decimal = Decimal("0.06")
    icms_rate: Decimal = Decimal("0.18")
    ipi_rate: Decimal = Decimal("0.10")
    pis_rate: Decimal = Decimal("0.0165")
    cofins_rate: Decimal = Decimal("0.076")
    iss_rate: Decimal = Decimal("0.05")
    irpj_rate: Decimal = Decimal("0.15")
    irpj_additional_rate: Decimal = Decimal("0.10")
    irpj_additional_threshold: Decimal = Decimal("20000")
    csll_rate: Decimal = Decimal("0.09")

    @property
    def itemized_sales_rate(self) -> Decimal:
        return self.icms_rate + self.ipi_rate + self.pis_rate + self.cofins_rate + self.iss_rate

    def as_dict(self):
        return asdict(self)


DEFAULT_TAX_RATES = TaxRates()

# Tabela simplificada por regime, usada quando a empresa não tem alíquotas próprias
FLAT_REGIME_RATES = {
    "simples_nacional": Decimal("0.06"),
    "lucro_presumido": Decimal("0.138"),
    "lucro_real": Decimal("0.34"),
}

_RATE_FIELDS = tuple(f.name for f in fields(TaxRates) if f.name != "use_das")


def resolve_tax_rates(config=None) -> TaxRates:
    """
    Recebe uma TaxConfiguration (ou qualquer objeto com os mesmos atributos) ou None.
    Campos nulos assumem o padrão; zero explícito é respeitado.
    """
    if config is None:
        return DEFAULT_TAX_RATES

    values = {"use_das": bool(getattr(config, "use_das", False))}
    for name in _RATE_FIELDS:
        raw = getattr(config, name, None)
        if raw is None:
            values[name] = getattr(DEFAULT_TAX_RATES, name)
        else:
            values[name] = to_decimal(raw, field=name)
    return TaxRates(**values)


@dataclass(frozen=True)
class SalesDeductions:
    icms: Decimal = ZERO
    ipi: Decimal = ZERO
    pis: Decimal = ZERO
    cofins: Decimal = ZERO
    iss: Decimal = ZERO
    das: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.icms + self.ipi + self.pis + self.cofins + self.iss + self.das


def compute_sales_deductions(gross_revenue: Decimal, tax_rates: TaxRates) -> SalesDeductions:
    # Apenas um caminho fica ativo: DAS ou os cinco tributos somados
    if tax_rates.use_das:
        return SalesDeductions(das=gross_revenue * tax_rates.das_rate)
    return SalesDeductions(
        icms=gross_revenue * tax_rates.icms_rate,
        ipi=gross_revenue * tax_rates.ipi_rate,
        pis=gross_revenue * tax_rates.pis_rate,
        cofins=gross_revenue * tax_rates.cofins_rate,
        iss=gross_revenue * tax_rates.iss_rate,
    )


def compute_net_revenue(gross_revenue, tax_rates=None, tax_regime=None) -> Decimal:
    """
    Receita líquida compartilhada pelo DRE e pelas métricas.

    Com alíquotas itemizadas usa as deduções completas; sem elas aplica a
    tabela simplificada do regime tributário (regime desconhecido: 0%).
    """
    gross_revenue = to_decimal(gross_revenue, field="gross_revenue")
    if tax_rates is not None:
        return gross_revenue - compute_sales_deductions(gross_revenue, tax_rates).total
    if tax_regime is None:
        return gross_revenue
    rate = FLAT_REGIME_RATES.get(tax_regime)
    if rate is None:
        logger.warning("Regime tributário desconhecido: %s. Nenhuma dedução aplicada.", tax_regime)
        rate = ZERO
    return gross_revenue - gross_revenue * rate
