"""Custom rule table: cross-field business rules.

Each CustomRule is tagged with the entity kinds it applies to and is
evaluated after the field rules, in registration order. Thresholds are
fixed lookup tables, not configuration.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable

import pydantic
from pydantic import TypeAdapter

from farmqc.core.types import EntityKind, Finding, ValidationContext

# Expected weight gain per year of age for reference species.
SPECIES_GROWTH_KG_PER_YEAR: dict[str, float] = {
    "cattle": 200.0,
    "horse": 100.0,
    "pig": 50.0,
    "sheep": 15.0,
    "goat": 12.0,
}
MAX_WEIGHT_DEVIATION = 0.5

CROP_MIN_GROWING_DAYS: dict[str, int] = {
    "lettuce": 30,
    "beans": 50,
    "carrots": 50,
    "corn": 60,
    "tomatoes": 60,
    "potatoes": 70,
    "soybeans": 80,
    "rice": 90,
    "wheat": 90,
}
DEFAULT_MIN_GROWING_DAYS = 60

PRIORITY_MIN_LEAD_DAYS: dict[str, int] = {
    "urgent": 1,
    "high": 3,
    "medium": 7,
    "low": 14,
}
OVERDUE_GRACE_DAYS = 1

SNOW_MAX_TEMPERATURE = 5.0
SUNNY_MAX_HUMIDITY = 90.0

_DATETIME = TypeAdapter(datetime)

RuleCheck = Callable[[dict[str, Any], ValidationContext], Finding | None]


@dataclass(frozen=True)
class CustomRule:
    """A named cross-field rule.

    Attributes:
        name: Unique rule identifier
        entity_kinds: Kinds the rule is evaluated for
        check: Returns a Finding when the record violates the rule
        fields: Record fields the rule reads, first one owns its findings
        description: Human-readable description
    """
    name: str
    entity_kinds: frozenset[EntityKind]
    check: RuleCheck
    fields: tuple[str, ...] = ()
    description: str = ""

    def applies_to(self, kind: EntityKind) -> bool:
        """Check whether the rule is evaluated for ``kind``."""
        return kind in self.entity_kinds

    @property
    def owner_field(self) -> str:
        """Field that findings from this rule are attributed to."""
        return self.fields[0] if self.fields else self.name


def _as_number(value: Any) -> float | None:
    """Finite numeric view of a record value, None when it has none."""
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_datetime(value: Any) -> datetime | None:
    """Naive local datetime view of a record value, None when unparseable."""
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    try:
        parsed = _DATETIME.validate_python(value)
    except pydantic.ValidationError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _reference_now(context: ValidationContext) -> datetime:
    now = context.timestamp
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return now


def check_age_weight(record: dict[str, Any], context: ValidationContext) -> Finding | None:
    """Warn when weight deviates more than 50% from age x species growth."""
    species = record.get("species")
    if not isinstance(species, str):
        return None
    growth = SPECIES_GROWTH_KG_PER_YEAR.get(species.strip().lower())
    age = _as_number(record.get("age"))
    weight = _as_number(record.get("weight"))
    if growth is None or age is None or weight is None or age <= 0:
        return None

    expected = age * growth
    if abs(weight - expected) / expected <= MAX_WEIGHT_DEVIATION:
        return None

    return Finding(
        field="weight",
        message=(
            f"Weight {weight:g}kg is unusual for a {age:g}-year-old {species} "
            f"(expected about {expected:.0f}kg)"
        ),
        code="age_weight_mismatch",
        severity="warning",
        value=record.get("weight"),
        expected=round(expected),
    )


def check_harvest_date(record: dict[str, Any], context: ValidationContext) -> Finding | None:
    """Warn when the growing period is shorter than the crop's minimum."""
    planted = _as_datetime(record.get("planting_date"))
    harvested = _as_datetime(record.get("harvest_date"))
    if planted is None or harvested is None:
        return None

    crop_type = record.get("crop_type")
    key = crop_type.strip().lower() if isinstance(crop_type, str) else ""
    min_days = CROP_MIN_GROWING_DAYS.get(key, DEFAULT_MIN_GROWING_DAYS)
    days = (harvested.date() - planted.date()).days
    if days >= min_days:
        return None

    return Finding(
        field="harvest_date",
        message=(
            f"Harvest is {days} days after planting; "
            f"{crop_type or 'this crop'} usually needs at least {min_days} days"
        ),
        code="harvest_too_early",
        severity="warning",
        value=days,
        expected=min_days,
    )


def check_task_due_date(record: dict[str, Any], context: ValidationContext) -> Finding | None:
    """Error for overdue tasks, warning for too little lead time.

    Measured against ``context.timestamp`` rather than the wall clock.
    """
    due = _as_datetime(record.get("due_date"))
    if due is None:
        return None

    now = _reference_now(context)
    days_until = (due - now).total_seconds() / 86400
    if days_until < -OVERDUE_GRACE_DAYS:
        return Finding(
            field="due_date",
            message=f"Task was due {abs(days_until):.0f} days ago",
            code="task_overdue",
            severity="error",
            value=record.get("due_date"),
            expected=f"on or after {now.date().isoformat()}",
        )

    priority = record.get("priority")
    min_days = PRIORITY_MIN_LEAD_DAYS.get(priority) if isinstance(priority, str) else None
    if min_days is None or priority == "urgent" or days_until >= min_days:
        return None

    return Finding(
        field="due_date",
        message=(
            f"Due in {max(days_until, 0):.1f} days; {priority} priority tasks "
            f"usually need at least {min_days} days"
        ),
        code="due_date_too_soon",
        severity="warning",
        value=record.get("due_date"),
        expected=min_days,
    )


def check_stock_level(record: dict[str, Any], context: ValidationContext) -> Finding | None:
    """Flag stock at or below its minimum; an empty stock is an error."""
    quantity = _as_number(record.get("quantity"))
    min_stock = _as_number(record.get("min_stock"))
    if quantity is None or min_stock is None or quantity > min_stock:
        return None

    out_of_stock = quantity == 0
    return Finding(
        field="quantity",
        message=(
            "Item is out of stock"
            if out_of_stock
            else f"Stock level {quantity:g} is at or below minimum {min_stock:g}"
        ),
        code="low_stock",
        severity="error" if out_of_stock else "warning",
        value=record.get("quantity"),
        expected=f"> {min_stock:g}",
    )


def check_snow_temperature(record: dict[str, Any], context: ValidationContext) -> Finding | None:
    """Warn about snow reported above 5 degrees C."""
    temperature = _as_number(record.get("temperature"))
    if record.get("condition") != "snowy" or temperature is None:
        return None
    if temperature <= SNOW_MAX_TEMPERATURE:
        return None

    return Finding(
        field="condition",
        message=f"Snowy conditions reported at {temperature:g} degrees C",
        code="weather_inconsistency",
        severity="warning",
        value=record.get("temperature"),
        expected=f"<= {SNOW_MAX_TEMPERATURE:g}",
    )


def check_sunny_humidity(record: dict[str, Any], context: ValidationContext) -> Finding | None:
    """Note sunny conditions reported with humidity above 90%."""
    humidity = _as_number(record.get("humidity"))
    if record.get("condition") != "sunny" or humidity is None:
        return None
    if humidity <= SUNNY_MAX_HUMIDITY:
        return None

    return Finding(
        field="humidity",
        message=f"Humidity of {humidity:g}% is unusual for sunny conditions",
        code="humidity_inconsistency",
        severity="info",
        value=record.get("humidity"),
        expected=f"<= {SUNNY_MAX_HUMIDITY:g}",
    )


CUSTOM_RULES: tuple[CustomRule, ...] = (
    CustomRule(
        name="age_weight_correlation",
        entity_kinds=frozenset({EntityKind.ANIMAL}),
        check=check_age_weight,
        fields=("weight", "age", "species"),
        description="Weight should be close to age x species growth rate",
    ),
    CustomRule(
        name="harvest_date_logic",
        entity_kinds=frozenset({EntityKind.CROP}),
        check=check_harvest_date,
        fields=("harvest_date", "planting_date", "crop_type"),
        description="Harvest must leave the crop its minimum growing period",
    ),
    CustomRule(
        name="task_due_date_logic",
        entity_kinds=frozenset({EntityKind.TASK}),
        check=check_task_due_date,
        fields=("due_date", "priority"),
        description="Tasks must not be overdue and need priority-specific lead time",
    ),
    CustomRule(
        name="inventory_stock_level",
        entity_kinds=frozenset({EntityKind.INVENTORY}),
        check=check_stock_level,
        fields=("quantity", "min_stock"),
        description="Quantity should stay above the minimum stock level",
    ),
    CustomRule(
        name="weather_snow_temperature",
        entity_kinds=frozenset({EntityKind.WEATHER}),
        check=check_snow_temperature,
        fields=("condition", "temperature"),
        description="Snow is implausible above 5 degrees C",
    ),
    CustomRule(
        name="weather_sunny_humidity",
        entity_kinds=frozenset({EntityKind.WEATHER}),
        check=check_sunny_humidity,
        fields=("humidity", "condition"),
        description="Sunny weather rarely comes with humidity above 90%",
    ),
)


def rules_applicable_to(kind: EntityKind | str) -> list[CustomRule]:
    """Custom rules for ``kind``, in registration order."""
    kind = EntityKind(kind)
    return [rule for rule in CUSTOM_RULES if rule.applies_to(kind)]
