"""
Compiled-in emission factors (DEFRA 2025 conversion factors).

Used when the factor store has no matching record or is unreachable.
Organised as ``category -> type -> entry``; electricity is keyed by region.
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.utils.constants import FactorCategory, GWPVersion, Scope

DEFRA_2025 = "DEFRA 2025"
DEFRA_YEAR = 2025


class FactorEntry(BaseModel):
    """One row of the default factor table."""

    model_config = ConfigDict(frozen=True)

    factor: Decimal
    unit: str
    scope: str
    source: str = DEFRA_2025
    year: int | None = DEFRA_YEAR
    gwp_version: str | None = None


def _entries(unit: str, scope: str, factors: dict[str, str], **extra) -> dict[str, FactorEntry]:
    return {
        name: FactorEntry(factor=Decimal(value), unit=unit, scope=scope, **extra)
        for name, value in factors.items()
    }


DEFAULT_FACTORS: dict[str, dict[str, FactorEntry]] = {
    FactorCategory.FUELS: {
        "diesel": FactorEntry(factor=Decimal("2.546"), unit="kgCO2e/litre", scope=Scope.SCOPE_1),
        "petrol": FactorEntry(factor=Decimal("2.315"), unit="kgCO2e/litre", scope=Scope.SCOPE_1),
        "natural-gas": FactorEntry(factor=Decimal("0.185"), unit="kgCO2e/kWh", scope=Scope.SCOPE_1),
        "lpg": FactorEntry(factor=Decimal("1.512"), unit="kgCO2e/litre", scope=Scope.SCOPE_1),
        "coal": FactorEntry(factor=Decimal("0.323"), unit="kgCO2e/kWh", scope=Scope.SCOPE_1),
        "heating-oil": FactorEntry(factor=Decimal("2.778"), unit="kgCO2e/litre", scope=Scope.SCOPE_1),
    },
    FactorCategory.REFRIGERANTS: _entries(
        "kgCO2e/kg",
        Scope.SCOPE_1,
        {
            "r-134a": "1430",
            "r-404a": "3922",
            "r-410a": "2088",
            "r-32": "675",
            "r-407c": "1774",
        },
        gwp_version=GWPVersion.AR5.value,
    ),
    FactorCategory.ELECTRICITY: _entries(
        "kgCO2e/kWh",
        Scope.SCOPE_2,
        {
            "uk": "0.20898",
            "uk-renewable": "0",
            "eu": "0.275",
            "us": "0.386",
            "china": "0.555",
            "india": "0.708",
            "global": "0.475",
        },
    ),
    FactorCategory.TRANSPORT: _entries(
        "kgCO2e/km",
        Scope.SCOPE_3,
        {
            "car-small-petrol": "0.14235",
            "car-medium-petrol": "0.18694",
            "car-large-petrol": "0.28143",
            "car-small-diesel": "0.12039",
            "car-medium-diesel": "0.14738",
            "car-large-diesel": "0.21167",
            "car-electric": "0.05331",
            "van-class-1": "0.12686",
            "van-class-2": "0.17289",
            "van-class-3": "0.25933",
            "motorcycle-small": "0.08449",
            "motorcycle-medium": "0.10127",
            "motorcycle-large": "0.13337",
        },
    )
    | _entries(
        "kgCO2e/passenger-km",
        Scope.SCOPE_3,
        {
            "bus": "0.10312",
            "rail-national": "0.03549",
            "rail-international": "0.00331",
            "taxi": "0.15075",
        },
    ),
    FactorCategory.AIR_TRAVEL: _entries(
        "kgCO2e/passenger-km",
        Scope.SCOPE_3,
        {
            "domestic-economy": "0.24587",
            "domestic-business": "0.36881",
            "short-haul-economy": "0.15573",
            "short-haul-business": "0.23359",
            "long-haul-economy": "0.14808",
            "long-haul-premium": "0.42765",
            "long-haul-business": "0.59210",
            "long-haul-first": "0.88815",
        },
    ),
    FactorCategory.ACCOMMODATION: {
        "hotel-room-night": FactorEntry(factor=Decimal("10.5"), unit="kgCO2e/night", scope=Scope.SCOPE_3),
    },
    FactorCategory.WASTE: _entries(
        "kgCO2e/tonne",
        Scope.SCOPE_3,
        {
            "landfill": "467",
            "incineration": "21",
            "recycling": "21",
            "composting": "8.3",
        },
    ),
    FactorCategory.WATER: _entries(
        "kgCO2e/m³",
        Scope.SCOPE_3,
        {
            "supply": "0.344",
            "treatment": "0.708",
        },
    ),
}


class DefaultFactorTable:
    """
    Read-only ``FactorTable`` over a compiled factor map.

    Type lookups are case-insensitive; categories must match exactly.
    """

    def __init__(self, factors: dict[str, dict[str, FactorEntry]] | None = None):
        source = DEFAULT_FACTORS if factors is None else factors
        self._factors = {
            category: {name.lower(): entry for name, entry in entries.items()}
            for category, entries in source.items()
        }

    def get(self, category: str, type_: str) -> FactorEntry | None:
        if not type_:
            return None
        return self._factors.get(category, {}).get(type_.lower())

    def categories(self) -> list[str]:
        return list(self._factors)

    def types(self, category: str) -> list[str]:
        return list(self._factors.get(category, {}))

    def entries(self, category: str) -> dict[str, FactorEntry]:
        return dict(self._factors.get(category, {}))
