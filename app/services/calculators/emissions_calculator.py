"""
Emissions calculator.

One async method per emission source. Each validates its inputs, resolves
the factor(s) it needs through the ``FactorResolver``, multiplies, and
returns a ``CalculationResult`` whose metadata reconstructs the arithmetic.
Nothing is persisted here; callers decide whether to store a result.
"""

import inspect
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from rapidfuzz import fuzz, process

from app.pydantic_models.calculation import CalculationResult, SupplierCertificate
from app.pydantic_models.emission_factor import EmissionFactorRecord
from app.services.calculators.exceptions import (
    EmissionCalculationError,
    UnknownFactorError,
    ValidationError,
)
from app.services.calculators.unit_converter import UnitConverter
from app.services.calculators.validation import (
    normalize_refrigerant_type,
    validate_bool,
    validate_choice,
    validate_non_negative,
    validate_percentage,
    validate_type,
)
from app.services.factors.resolver import FactorResolver
from app.utils.constants import (
    CO2E_UNIT,
    DEFAULT_FUZZY_THRESHOLD,
    CalculationSource,
    DataQuality,
    ElectricityFactorType,
    ElectricityMethod,
    FactorCategory,
    GWPVersion,
    Scope,
    SourceType,
)

logger = logging.getLogger(__name__)

CERTIFICATE_SOURCE = "Supplier certificate"


def _fmt(value: Decimal) -> str:
    """Plain (non-exponent) decimal string."""
    return f"{value:f}"


class EmissionsCalculator:
    """
    GHG Protocol emissions calculations over a shared factor resolver.

    Example:
        >>> calculator = EmissionsCalculator(FactorResolver.build())
        >>> result = await calculator.calculate_stationary_combustion("diesel", 100)
        >>> result.co2e
        Decimal('254.600')
    """

    _METHODS = {
        CalculationSource.STATIONARY_COMBUSTION: "calculate_stationary_combustion",
        CalculationSource.MOBILE_COMBUSTION: "calculate_mobile_combustion",
        CalculationSource.FUGITIVE_EMISSIONS: "calculate_fugitive_emissions",
        CalculationSource.ELECTRICITY: "calculate_electricity",
        CalculationSource.ROAD_TRANSPORT: "calculate_road_transport",
        CalculationSource.AIR_TRAVEL: "calculate_air_travel",
        CalculationSource.ACCOMMODATION: "calculate_accommodation",
        CalculationSource.WASTE: "calculate_waste",
        CalculationSource.WATER: "calculate_water",
    }

    def __init__(self, resolver: FactorResolver, fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD):
        self.resolver = resolver
        self.fuzzy_threshold = fuzzy_threshold

    # Factor lookup

    def _suggest(self, category: str, value: str) -> str | None:
        choices = self.resolver.table.types(category)
        if not choices or not value:
            return None
        match = process.extractOne(
            value, choices, scorer=fuzz.ratio, score_cutoff=self.fuzzy_threshold
        )
        return match[0] if match else None

    async def _require_factor(
        self,
        category: str,
        type_: str,
        region: str | None = None,
        field: str | None = None,
    ) -> EmissionFactorRecord:
        record = await self.resolver.resolve(category, type_, region)
        if record is not None:
            return record

        # For electricity the region is what selects the default factor
        unknown = region if category == FactorCategory.ELECTRICITY and region else type_
        raise UnknownFactorError(
            category,
            type_,
            region=region,
            field=field,
            suggestion=self._suggest(category, unknown),
        )

    @staticmethod
    def _provenance(record: EmissionFactorRecord) -> str:
        if record.data_quality == DataQuality.HIGH:
            return f"{record.source} (factor store)"
        return f"{record.source} (default factor table)"

    def _build_result(
        self,
        *,
        co2e: Decimal,
        calculation: str,
        scope: str,
        source_type: str,
        activity_type: str,
        activity_value: Decimal,
        activity_unit: str,
        factor: Decimal,
        factor_unit: str,
        factor_source: str,
        factor_year: int | None,
        data_quality: str,
        provenance: str,
        **extra: Any,
    ) -> CalculationResult:
        logger.info(
            f"Calculated {_fmt(co2e)} {CO2E_UNIT} for {source_type} ({activity_type})"
        )
        return CalculationResult(
            co2e=co2e,
            unit=CO2E_UNIT,
            scope=scope,
            source_type=source_type,
            activity_type=activity_type,
            activity_value=activity_value,
            activity_unit=activity_unit,
            emission_factor=factor,
            emission_factor_unit=factor_unit,
            emission_factor_source=factor_source,
            emission_factor_year=factor_year,
            metadata={
                "calculation": calculation,
                "data_quality": data_quality,
                "provenance": provenance,
                **extra,
            },
        )

    async def _simple(
        self,
        category: str,
        type_: str,
        type_field: str,
        value: Any,
        value_field: str,
        source_type: str,
        activity_unit: str,
    ) -> CalculationResult:
        """``value × factor`` for sources with a single factor and no adjustments."""
        type_ = validate_type(type_, type_field)
        quantity = validate_non_negative(value, value_field)
        record = await self._require_factor(category, type_, field=type_field)

        co2e = UnitConverter.round_co2e(quantity * record.factor)
        return self._build_result(
            co2e=co2e,
            calculation=f"{_fmt(quantity)} × {_fmt(record.factor)} = {_fmt(co2e)} {CO2E_UNIT}",
            scope=record.scope,
            source_type=source_type,
            activity_type=type_,
            activity_value=quantity,
            activity_unit=activity_unit,
            factor=record.factor,
            factor_unit=record.unit,
            factor_source=record.source,
            factor_year=record.year,
            data_quality=record.data_quality,
            provenance=self._provenance(record),
        )

    # Scope 1

    async def calculate_stationary_combustion(
        self, fuel_type: str, quantity: Any, biofuel_blend: Any = 0
    ) -> CalculationResult:
        """
        Emissions from burning fuel in owned boilers, furnaces and generators.

        ``co2e = quantity × factor × (1 - biofuel_blend / 100)``
        """
        fuel_type = validate_type(fuel_type, "fuel_type")
        quantity = validate_non_negative(quantity, "quantity")
        blend = validate_percentage(biofuel_blend, "biofuel_blend")
        record = await self._require_factor(FactorCategory.FUELS, fuel_type, field="fuel_type")

        effective_factor = record.factor * (1 - blend / 100)
        co2e = UnitConverter.round_co2e(quantity * effective_factor)

        if blend:
            calculation = (
                f"{_fmt(quantity)} × {_fmt(record.factor)} × (1 - {_fmt(blend)}/100) "
                f"= {_fmt(co2e)} {CO2E_UNIT}"
            )
        else:
            calculation = f"{_fmt(quantity)} × {_fmt(record.factor)} = {_fmt(co2e)} {CO2E_UNIT}"

        return self._build_result(
            co2e=co2e,
            calculation=calculation,
            scope=record.scope,
            source_type=SourceType.STATIONARY_COMBUSTION,
            activity_type=fuel_type,
            activity_value=quantity,
            activity_unit=record.activity_unit,
            factor=effective_factor,
            factor_unit=record.unit,
            factor_source=record.source,
            factor_year=record.year,
            data_quality=record.data_quality,
            provenance=self._provenance(record),
            base_factor=record.factor,
            biofuel_blend=blend,
        )

    async def calculate_mobile_combustion(
        self,
        fuel_type: str,
        fuel_used: Any = None,
        distance: Any = None,
        fuel_consumption: Any = None,
    ) -> CalculationResult:
        """
        Emissions from fuel burnt in owned vehicles.

        Takes either ``fuel_used`` directly or ``distance`` and
        ``fuel_consumption`` (fuel per distance unit), from which
        ``fuel_used = distance × fuel_consumption``.
        """
        fuel_type = validate_type(fuel_type, "fuel_type")

        if fuel_used is not None:
            fuel_used = validate_non_negative(fuel_used, "fuel_used")
            input_mode = "fuel_used"
            derivation = ""
        else:
            if distance is None or fuel_consumption is None:
                missing = "distance" if distance is None else "fuel_consumption"
                raise ValidationError(
                    "Either fuel_used or both distance and fuel_consumption are required",
                    field=missing,
                )
            distance = validate_non_negative(distance, "distance")
            fuel_consumption = validate_non_negative(fuel_consumption, "fuel_consumption")
            fuel_used = distance * fuel_consumption
            input_mode = "distance"
            derivation = f"{_fmt(distance)} × {_fmt(fuel_consumption)} = {_fmt(fuel_used)}; "

        record = await self._require_factor(FactorCategory.FUELS, fuel_type, field="fuel_type")
        co2e = UnitConverter.round_co2e(fuel_used * record.factor)

        extra: dict[str, Any] = {"input_mode": input_mode}
        if input_mode == "distance":
            extra["distance"] = distance
            extra["fuel_consumption"] = fuel_consumption

        return self._build_result(
            co2e=co2e,
            calculation=(
                f"{derivation}{_fmt(fuel_used)} × {_fmt(record.factor)} "
                f"= {_fmt(co2e)} {CO2E_UNIT}"
            ),
            scope=record.scope,
            source_type=SourceType.MOBILE_COMBUSTION,
            activity_type=fuel_type,
            activity_value=fuel_used,
            activity_unit=record.activity_unit,
            factor=record.factor,
            factor_unit=record.unit,
            factor_source=record.source,
            factor_year=record.year,
            data_quality=record.data_quality,
            provenance=self._provenance(record),
            **extra,
        )

    async def calculate_fugitive_emissions(
        self, refrigerant_type: str, quantity: Any, gwp_version: Any = GWPVersion.AR5.value
    ) -> CalculationResult:
        """
        Emissions from refrigerant leaks.

        The factor is the refrigerant's GWP. ``gwp_version`` only labels the
        result when the factor carries no GWP version of its own; it never
        changes the value.
        """
        refrigerant_type = normalize_refrigerant_type(
            validate_type(refrigerant_type, "refrigerant_type")
        )
        quantity = validate_non_negative(quantity, "quantity")
        if isinstance(gwp_version, str):
            gwp_version = gwp_version.strip().upper()
        gwp_version = validate_choice(gwp_version, GWPVersion, "gwp_version")
        record = await self._require_factor(
            FactorCategory.REFRIGERANTS, refrigerant_type, field="refrigerant_type"
        )

        co2e = UnitConverter.round_co2e(quantity * record.factor)
        return self._build_result(
            co2e=co2e,
            calculation=f"{_fmt(quantity)} × {_fmt(record.factor)} = {_fmt(co2e)} {CO2E_UNIT}",
            scope=record.scope,
            source_type=SourceType.FUGITIVE_EMISSIONS,
            activity_type=refrigerant_type,
            activity_value=quantity,
            activity_unit="kg",
            factor=record.factor,
            factor_unit=record.unit,
            factor_source=record.source,
            factor_year=record.year,
            data_quality=record.data_quality,
            provenance=self._provenance(record),
            gwp=record.factor,
            gwp_version=record.gwp_version or gwp_version.value,
        )

    # Scope 2

    @staticmethod
    def _certificate_factor(certificate: Any) -> Decimal | None:
        """The certificate's factor if it is valid and retired, else None."""
        if certificate is None:
            return None
        if isinstance(certificate, SupplierCertificate):
            certificate = certificate.model_dump()
        if not isinstance(certificate, Mapping):
            return None
        if certificate.get("valid") is not True or certificate.get("retired") is not True:
            return None
        try:
            return validate_non_negative(certificate.get("factor"), "supplier_certificate.factor")
        except ValidationError:
            return None

    async def calculate_electricity(
        self,
        consumption: Any,
        region: str = "uk",
        method: Any = ElectricityMethod.LOCATION.value,
        supplier_certificate: SupplierCertificate | Mapping | None = None,
    ) -> CalculationResult:
        """
        Emissions from purchased electricity.

        Location-based uses the region's grid-average factor. Market-based
        uses a valid, retired supplier certificate when one is given and the
        region's residual mix otherwise.
        """
        consumption = validate_non_negative(consumption, "consumption")
        region = validate_type(region, "region")
        if isinstance(method, str):
            method = method.strip().lower()
        method = validate_choice(method, ElectricityMethod, "method")

        certificate_factor = None
        if method == ElectricityMethod.MARKET:
            certificate_factor = self._certificate_factor(supplier_certificate)
            if certificate_factor is None:
                logger.warning(
                    f"Market-based electricity for region '{region}' has no valid "
                    f"supplier certificate, using residual mix"
                )

        if certificate_factor is not None:
            co2e = UnitConverter.round_co2e(consumption * certificate_factor)
            certificate_id = None
            if isinstance(supplier_certificate, SupplierCertificate):
                certificate_id = supplier_certificate.certificate_id
            elif isinstance(supplier_certificate, Mapping):
                certificate_id = supplier_certificate.get("certificate_id")
            return self._build_result(
                co2e=co2e,
                calculation=(
                    f"{_fmt(consumption)} × {_fmt(certificate_factor)} "
                    f"= {_fmt(co2e)} {CO2E_UNIT}"
                ),
                scope=Scope.SCOPE_2,
                source_type=SourceType.PURCHASED_ELECTRICITY,
                activity_type=region,
                activity_value=consumption,
                activity_unit="kWh",
                factor=certificate_factor,
                factor_unit="kgCO2e/kWh",
                factor_source=CERTIFICATE_SOURCE,
                factor_year=None,
                data_quality=DataQuality.HIGH,
                provenance=(
                    f"{CERTIFICATE_SOURCE} {certificate_id}" if certificate_id else CERTIFICATE_SOURCE
                ),
                region=region,
                method=method.value,
                certificate_applied=True,
            )

        factor_type = (
            ElectricityFactorType.RESIDUAL_MIX
            if method == ElectricityMethod.MARKET
            else ElectricityFactorType.GRID_AVERAGE
        )
        record = await self._require_factor(
            FactorCategory.ELECTRICITY, factor_type, region=region, field="region"
        )
        co2e = UnitConverter.round_co2e(consumption * record.factor)
        return self._build_result(
            co2e=co2e,
            calculation=f"{_fmt(consumption)} × {_fmt(record.factor)} = {_fmt(co2e)} {CO2E_UNIT}",
            scope=record.scope,
            source_type=SourceType.PURCHASED_ELECTRICITY,
            activity_type=region,
            activity_value=consumption,
            activity_unit="kWh",
            factor=record.factor,
            factor_unit=record.unit,
            factor_source=record.source,
            factor_year=record.year,
            data_quality=record.data_quality,
            provenance=self._provenance(record),
            region=region,
            method=method.value,
            factor_type=factor_type,
            certificate_applied=False,
        )

    # Scope 3

    async def calculate_road_transport(self, vehicle_type: str, distance: Any) -> CalculationResult:
        return await self._simple(
            FactorCategory.TRANSPORT,
            vehicle_type,
            "vehicle_type",
            distance,
            "distance",
            SourceType.BUSINESS_TRAVEL,
            "km",
        )

    async def calculate_air_travel(self, flight_class: str, distance: Any) -> CalculationResult:
        return await self._simple(
            FactorCategory.AIR_TRAVEL,
            flight_class,
            "flight_class",
            distance,
            "distance",
            SourceType.BUSINESS_TRAVEL,
            "km",
        )

    async def calculate_accommodation(self, nights: Any) -> CalculationResult:
        """Hotel stays, at the fixed per room-night factor."""
        return await self._simple(
            FactorCategory.ACCOMMODATION,
            "hotel-room-night",
            "accommodation_type",
            nights,
            "nights",
            SourceType.BUSINESS_TRAVEL,
            "nights",
        )

    async def calculate_waste(self, waste_type: str, weight: Any) -> CalculationResult:
        """
        Emissions from waste disposal. ``weight`` is in kg; factors are per tonne.
        """
        waste_type = validate_type(waste_type, "waste_type")
        weight = validate_non_negative(weight, "weight")
        record = await self._require_factor(FactorCategory.WASTE, waste_type, field="waste_type")

        tonnes = UnitConverter.kg_to_tonnes(weight)
        co2e = UnitConverter.round_co2e(tonnes * record.factor)
        return self._build_result(
            co2e=co2e,
            calculation=(
                f"{_fmt(weight)} kg / 1000 = {_fmt(tonnes)} tonnes; "
                f"{_fmt(tonnes)} × {_fmt(record.factor)} = {_fmt(co2e)} {CO2E_UNIT}"
            ),
            scope=record.scope,
            source_type=SourceType.WASTE_GENERATED,
            activity_type=waste_type,
            activity_value=weight,
            activity_unit="kg",
            factor=record.factor,
            factor_unit=record.unit,
            factor_source=record.source,
            factor_year=record.year,
            data_quality=record.data_quality,
            provenance=self._provenance(record),
            tonnes=tonnes,
        )

    async def calculate_water(self, volume: Any, include_wastewater: Any = True) -> CalculationResult:
        """
        Emissions from water supply, plus wastewater treatment when included.

        Data quality is reported as medium whatever the quality of the two
        component factors.
        """
        volume = validate_non_negative(volume, "volume")
        include_wastewater = validate_bool(include_wastewater, "include_wastewater")

        supply = await self._require_factor(FactorCategory.WATER, "supply", field="volume")
        supply_emissions = volume * supply.factor
        factor = supply.factor
        treatment_emissions = Decimal("0")
        parts = [f"{_fmt(volume)} × {_fmt(supply.factor)}"]

        if include_wastewater:
            treatment = await self._require_factor(FactorCategory.WATER, "treatment", field="volume")
            treatment_emissions = volume * treatment.factor
            factor = supply.factor + treatment.factor
            parts.append(f"{_fmt(volume)} × {_fmt(treatment.factor)}")

        co2e = UnitConverter.round_co2e(supply_emissions + treatment_emissions)
        return self._build_result(
            co2e=co2e,
            calculation=f"{' + '.join(parts)} = {_fmt(co2e)} {CO2E_UNIT}",
            scope=supply.scope,
            source_type=SourceType.WATER_CONSUMPTION,
            activity_type="water",
            activity_value=volume,
            activity_unit="m³",
            factor=factor,
            factor_unit=supply.unit,
            factor_source=supply.source,
            factor_year=supply.year,
            data_quality=DataQuality.MEDIUM,
            provenance=self._provenance(supply),
            supply_emissions=supply_emissions,
            treatment_emissions=treatment_emissions,
            include_wastewater=include_wastewater,
        )

    # Dispatch

    async def calculate(self, source: CalculationSource | str, **inputs: Any) -> CalculationResult:
        """
        Run the calculation for ``source`` with keyword ``inputs``.

        Raises:
            ValidationError: unknown source or inputs the method does not take
        """
        source = validate_choice(source, CalculationSource, "source")
        method = getattr(self, self._METHODS[source])
        try:
            inspect.signature(method).bind(**inputs)
        except TypeError as e:
            raise ValidationError(f"Invalid inputs for {source.value}: {e}", field="inputs")
        return await method(**inputs)

    async def calculate_batch(
        self, entries: list[Mapping[str, Any]], fail_fast: bool = False
    ) -> dict[str, Any]:
        """
        Calculate emissions for a list of ``{"source", "inputs"}`` entries.

        Args:
            entries: Entries to calculate, in order
            fail_fast: If True, the first failing entry raises

        Returns:
            Dictionary with results, statistics, and errors
        """
        logger.info(f"Starting batch calculation for {len(entries)} entries")

        results: list[CalculationResult] = []
        errors: list[dict[str, Any]] = []
        stats_by_scope: dict[str, dict[str, Any]] = {}

        for index, entry in enumerate(entries):
            source = entry.get("source")
            inputs = entry.get("inputs") or {}
            try:
                result = await self.calculate(source, **inputs)
            except Exception as e:
                if fail_fast:
                    raise
                logger.error(f"Error processing batch entry {index} ({source}): {e}")
                errors.append(
                    {
                        "index": index,
                        "source": getattr(source, "value", str(source)),
                        "error": str(e),
                        "field": e.field if isinstance(e, EmissionCalculationError) else None,
                    }
                )
                continue

            results.append(result)
            scope_stats = stats_by_scope.setdefault(
                result.scope, {"count": 0, "total_co2e": Decimal("0")}
            )
            scope_stats["count"] += 1
            scope_stats["total_co2e"] += result.co2e

        total_co2e = sum((r.co2e for r in results), Decimal("0"))
        success_rate = (len(results) / len(entries) * 100) if entries else 0

        logger.info(
            f"Batch calculation complete: {len(results)}/{len(entries)} successful, "
            f"{_fmt(total_co2e)} {CO2E_UNIT} total"
        )

        return {
            "results": results,
            "statistics": {
                "total_entries": len(entries),
                "total_processed": len(results),
                "total_errors": len(errors),
                "success_rate": f"{success_rate:.2f}%",
                "total_co2e": total_co2e,
                "by_scope": stats_by_scope,
            },
            "errors": errors,
        }
