"""
Application constants following kkb_fastapi pattern.
"""
from enum import Enum


class ConfigFile:
    """Configuration file paths."""
    PRODUCTION = "production.toml"
    DEVELOPMENT = "development.toml"
    TEST = "test.toml"


class Scope:
    """GHG Protocol Scope constants."""
    SCOPE_1 = "scope1"
    SCOPE_2 = "scope2"
    SCOPE_3 = "scope3"


class ScopeEnum(str, Enum):
    """GHG Protocol Scope enum for API parameters."""
    SCOPE_1 = "scope1"
    SCOPE_2 = "scope2"
    SCOPE_3 = "scope3"


class FactorCategory:
    """Emission factor categories used by the default table and the factor store."""
    FUELS = "fuels"
    REFRIGERANTS = "refrigerants"
    ELECTRICITY = "electricity"
    TRANSPORT = "transport"
    AIR_TRAVEL = "air_travel"
    ACCOMMODATION = "accommodation"
    WASTE = "waste"
    WATER = "water"


class SourceType:
    """Source type tags attached to calculation results."""
    STATIONARY_COMBUSTION = "stationary_combustion"
    MOBILE_COMBUSTION = "mobile_combustion"
    FUGITIVE_EMISSIONS = "fugitive_emissions"
    PURCHASED_ELECTRICITY = "purchased_electricity"
    BUSINESS_TRAVEL = "business_travel"
    WASTE_GENERATED = "waste_generated"
    WATER_CONSUMPTION = "water_consumption"


class CalculationSource(str, Enum):
    """Calculation entry points, used for batch dispatch and API routes."""
    STATIONARY_COMBUSTION = "stationary-combustion"
    MOBILE_COMBUSTION = "mobile-combustion"
    FUGITIVE_EMISSIONS = "fugitive-emissions"
    ELECTRICITY = "electricity"
    ROAD_TRANSPORT = "road-transport"
    AIR_TRAVEL = "air-travel"
    ACCOMMODATION = "accommodation"
    WASTE = "waste"
    WATER = "water"


class DataQuality:
    """Data quality tags for resolved emission factors."""
    HIGH = "high"
    MEDIUM = "medium"


class GWPVersion(str, Enum):
    """IPCC Assessment Report the GWP values are taken from."""
    AR4 = "AR4"
    AR5 = "AR5"
    AR6 = "AR6"


class ElectricityMethod(str, Enum):
    """GHG Protocol Scope 2 accounting methods."""
    LOCATION = "location"
    MARKET = "market"


class ElectricityFactorType:
    """Factor types looked up for purchased electricity."""
    GRID_AVERAGE = "grid-average"
    RESIDUAL_MIX = "residual-mix"


# Emission factor resolution
DEFAULT_REGION = "UK"
FACTOR_CACHE_TTL_SECONDS = 300
DEFAULT_FUZZY_THRESHOLD = 80

# Results are always reported in kilograms of CO2 equivalent
CO2E_UNIT = "kgCO2e"
CO2E_DECIMAL_PLACES = 3

# Unit conversion constants
KG_PER_TONNE = 1000

# Largest accepted activity quantity or certificate factor
MAX_NUMERIC_INPUT = 10**15
