from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import CalculationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PERCENT_PLACES = Decimal("0.01")
MONEY_PLACES = Decimal("0.01")


def to_decimal(value, field="amount") -> Decimal:
    """Converte para Decimal recusando valores não finitos (NaN/Infinity)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            # float passa por str para não carregar o erro binário
            number = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise CalculationError(f"{field} inválido: {value!r}") from exc
    if not number.is_finite():
        raise CalculationError(f"{field} não finito: {value!r}")
    return number


def round_percent(value: Decimal) -> Decimal:
    return value.quantize(PERCENT_PLACES, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def safe_ratio(numerator: Decimal, denominator: Decimal, default=ZERO) -> Decimal:
    """numerator / denominator, ou o default quando o denominador é <= 0."""
    if denominator <= 0:
        return default
    return numerator / denominator


def safe_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator <= 0:
        return round_percent(ZERO)
    return round_percent(numerator / denominator * HUNDRED)
