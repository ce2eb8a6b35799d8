"""
Unit conversion utilities for emissions calculations.

Stateless helpers that keep all arithmetic in Decimal.
"""
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from app.utils.constants import CO2E_DECIMAL_PLACES, KG_PER_TONNE

# Commas are only accepted as thousands grouping, e.g. "1,234,567.8"
_GROUPED_NUMBER = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")


class UnitConverter:
    """
    Unit conversion service.

    Provides conversions and rounding used by the emissions calculator.
    """

    KG_TO_TONNES = Decimal("1") / Decimal(KG_PER_TONNE)
    CO2E_QUANTUM = Decimal(1).scaleb(-CO2E_DECIMAL_PLACES)

    @staticmethod
    def kg_to_tonnes(kg: float | Decimal) -> Decimal:
        """
        Convert kilograms to tonnes.

        Example:
            >>> UnitConverter.kg_to_tonnes(Decimal("1500"))
            Decimal('1.500')
        """
        return UnitConverter.normalize_number(kg) * UnitConverter.KG_TO_TONNES

    @staticmethod
    def normalize_number(value: str | int | float | Decimal) -> Decimal:
        """
        Normalize a number value to Decimal.

        Handles string inputs with thousands separators, floats, and existing
        Decimals. A comma anywhere other than a thousands group is rejected.

        Raises:
            InvalidOperation: if the value is not a number

        Example:
            >>> UnitConverter.normalize_number("1,234.56")
            Decimal('1234.56')
        """

        if isinstance(value, Decimal):
            return value

        if isinstance(value, str):
            value = value.strip()
            if "," in value:
                if not _GROUPED_NUMBER.match(value):
                    raise InvalidOperation(f"malformed number {value!r}")
                value = value.replace(",", "")

        return Decimal(str(value))

    @staticmethod
    def round_co2e(value: Decimal) -> Decimal:
        """Round a CO2e value to the reporting precision (3 places, half up)."""
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, value.adjusted() + CO2E_DECIMAL_PLACES + 2)
            return value.quantize(UnitConverter.CO2E_QUANTUM, rounding=ROUND_HALF_UP)
