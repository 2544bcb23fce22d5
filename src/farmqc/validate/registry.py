"""Schema registry: per-entity ordered field rules.

Each entity kind gets the shared base rules (id, name, status, created_at,
updated_at) followed by its own rules in registration order. Value schemas
are pydantic TypeAdapters in lax mode, so a rule can tell a rejected value
from one that was merely coerced (``"5"`` -> ``5.0``).

Example:
    >>> [rule.name for rule in rules_for("task")][:5]
    ['id', 'name', 'status', 'created_at', 'updated_at']
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Any, Callable, Literal, Union

from pydantic import BeforeValidator, Field, TypeAdapter

from farmqc.core.exceptions import ConfigurationError
from farmqc.core.types import EntityKind


@dataclass(frozen=True)
class FieldRule:
    """Validation rule for a single record field.

    Attributes:
        name: Record key the rule applies to
        schema: Lax pydantic adapter for the field's value
        expected: Human-readable description of accepted values
        required: Whether an absent/None/"" value is an error
        depends_on: Fields that give this field its meaning
        auto_fix: Applied to a coerced value before it is stored back
    """
    name: str
    schema: TypeAdapter
    expected: str
    required: bool = False
    depends_on: tuple[str, ...] = ()
    auto_fix: Callable[[Any], Any] | None = None

    def coerce(self, value: Any) -> Any:
        """Validate ``value``, returning the coerced value.

        Raises:
            pydantic.ValidationError: listing every violated constraint
        """
        return self.schema.validate_python(value)


def _iso(value: date | datetime) -> str:
    return value.isoformat()


def _coerced(value: Any) -> Any:
    return value


def _reject_bool(value: Any) -> Any:
    # bool subclasses int, so lax int/float would accept it
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    return value


def _bounds(gt: float | None, ge: float | None, lt: float | None, le: float | None) -> str:
    parts = []
    for op, bound in ((">", gt), (">=", ge), ("<", lt), ("<=", le)):
        if bound is not None:
            parts.append(f"{op} {bound:g}")
    return " and ".join(parts)


def text(
    name: str,
    *,
    required: bool = False,
    min_length: int = 1,
    max_length: int | None = None,
    pattern: str | None = None,
    depends_on: tuple[str, ...] = (),
) -> FieldRule:
    """String field with length and optional pattern constraints."""
    annotated = Annotated[
        str, Field(min_length=min_length, max_length=max_length, pattern=pattern)
    ]
    if max_length is not None:
        expected = f"text ({min_length}-{max_length} chars)"
    else:
        expected = f"text (at least {min_length} chars)"
    if pattern is not None:
        expected += " matching a valid format"
    return FieldRule(
        name=name,
        schema=TypeAdapter(annotated),
        expected=expected,
        required=required,
        depends_on=depends_on,
    )


def number(
    name: str,
    *,
    required: bool = False,
    integer: bool = False,
    gt: float | None = None,
    ge: float | None = None,
    lt: float | None = None,
    le: float | None = None,
    depends_on: tuple[str, ...] = (),
) -> FieldRule:
    """Numeric field with optional bounds; coerced numbers are stored back."""
    if integer:
        constraints = Field(gt=gt, ge=ge, lt=lt, le=le)
    else:
        constraints = Field(gt=gt, ge=ge, lt=lt, le=le, allow_inf_nan=False)
    annotated = Annotated[
        int if integer else float, constraints, BeforeValidator(_reject_bool)
    ]
    label = "integer" if integer else "number"
    bounds = _bounds(gt, ge, lt, le)
    return FieldRule(
        name=name,
        schema=TypeAdapter(annotated),
        expected=f"{label} {bounds}" if bounds else label,
        required=required,
        depends_on=depends_on,
        auto_fix=_coerced,
    )


def choice(
    name: str,
    options: tuple[str, ...],
    *,
    required: bool = False,
) -> FieldRule:
    """Field restricted to a closed set of string values."""
    return FieldRule(
        name=name,
        schema=TypeAdapter(Literal[options]),
        expected="one of: " + ", ".join(options),
        required=required,
    )


def date_field(
    name: str,
    *,
    required: bool = False,
    depends_on: tuple[str, ...] = (),
) -> FieldRule:
    """Calendar date, normalized to ``YYYY-MM-DD``."""
    return FieldRule(
        name=name,
        schema=TypeAdapter(date),
        expected="date",
        required=required,
        depends_on=depends_on,
        auto_fix=_iso,
    )


def datetime_field(
    name: str,
    *,
    required: bool = False,
    depends_on: tuple[str, ...] = (),
) -> FieldRule:
    """Timestamp, normalized to ISO-8601."""
    return FieldRule(
        name=name,
        schema=TypeAdapter(datetime),
        expected="datetime",
        required=required,
        depends_on=depends_on,
        auto_fix=_iso,
    )


def boolean(name: str, *, required: bool = False) -> FieldRule:
    """Boolean flag; accepted string spellings are stored back as bools."""
    return FieldRule(
        name=name,
        schema=TypeAdapter(bool),
        expected="boolean",
        required=required,
        auto_fix=_coerced,
    )


def identifier(name: str, *, required: bool = False) -> FieldRule:
    """Integer or string identifier."""
    return FieldRule(
        name=name,
        schema=TypeAdapter(Union[int, str]),
        expected="integer or text",
        required=required,
    )


_BASE_RULES: tuple[FieldRule, ...] = (
    identifier("id"),
    text("name", max_length=200),
    text("status", required=True, max_length=50),
    datetime_field("created_at"),
    datetime_field("updated_at", required=True),
)

_FARM_REF = number("farm_id", integer=True, gt=0)

_ENTITY_RULES: dict[EntityKind, tuple[FieldRule, ...]] = {
    EntityKind.ANIMAL: (
        text("species", required=True, max_length=100),
        text("breed", max_length=100),
        choice("sex", ("male", "female")),
        number("age", ge=0, le=50),
        number("weight", gt=0, le=2000, depends_on=("species", "age")),
        date_field("birth_date"),
        choice("health_status", ("healthy", "sick", "recovering", "critical")),
        _FARM_REF,
        boolean("is_active"),
    ),
    EntityKind.CROP: (
        text("crop_type", required=True, max_length=100),
        text("variety", max_length=100),
        date_field("planting_date", required=True),
        date_field("harvest_date", depends_on=("planting_date", "crop_type")),
        number("area_planted", gt=0),
        number("expected_yield", ge=0),
        number("field_id", integer=True, gt=0),
        _FARM_REF,
    ),
    EntityKind.TASK: (
        text("title", max_length=200),
        text("assignee", required=True, max_length=100),
        datetime_field("due_date", required=True, depends_on=("priority",)),
        choice("priority", ("low", "medium", "high", "urgent"), required=True),
        text("description", max_length=1000),
        choice(
            "task_type",
            ("planting", "harvesting", "feeding", "maintenance", "inspection", "other"),
        ),
        _FARM_REF,
    ),
    EntityKind.INVENTORY: (
        number("quantity", required=True, ge=0),
        text("unit", required=True, max_length=20),
        number("min_stock", ge=0, depends_on=("quantity",)),
        choice(
            "category",
            ("seed", "feed", "fertilizer", "pesticide", "equipment", "medicine", "other"),
        ),
        number("unit_cost", ge=0),
        date_field("expiry_date"),
        _FARM_REF,
    ),
    EntityKind.FARM: (
        identifier("owner_id", required=True),
        text("location", max_length=500),
        number("area_hectares", gt=0),
        choice("farm_type", ("organic", "conventional", "sustainable", "mixed")),
        text("timezone", max_length=50),
    ),
    EntityKind.USER: (
        text(
            "email",
            required=True,
            max_length=254,
            pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        ),
        choice("role", ("user", "admin", "manager")),
        boolean("is_active"),
    ),
    EntityKind.WEATHER: (
        number("temperature", required=True, ge=-60, le=60),
        number("humidity", required=True, ge=0, le=100),
        choice(
            "condition",
            ("sunny", "cloudy", "rainy", "snowy", "stormy", "foggy", "windy"),
            required=True,
        ),
        number("rainfall", ge=0),
        number("wind_speed", ge=0),
        date_field("recorded_date"),
        _FARM_REF,
    ),
}

_unregistered = [kind.value for kind in EntityKind if kind not in _ENTITY_RULES]
if _unregistered:
    raise ConfigurationError(
        "Schema registry is missing entity kinds",
        setting_name="entity_rules",
        setting_value=", ".join(_unregistered),
    )


def rules_for(kind: EntityKind | str) -> list[FieldRule]:
    """Ordered field rules for an entity kind: base rules first.

    Args:
        kind: Entity kind (enum member or its value)

    Returns:
        A fresh list of the kind's FieldRules
    """
    return [*_BASE_RULES, *_ENTITY_RULES[EntityKind(kind)]]


def known_fields(kind: EntityKind | str) -> frozenset[str]:
    """Names of every field some rule of ``kind`` validates."""
    return frozenset(rule.name for rule in rules_for(kind))
