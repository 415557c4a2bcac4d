"""Deal input value objects.

Frozen dataclasses with Decimal money. Rates are percentages (7 means 7%).
Dataclass defaults are the single place input defaults are resolved;
``from_partial`` fills a struct field by field from scenario data and
``DealInputs.with_field`` builds a copy with one field replaced.
"""

import re
from dataclasses import MISSING, dataclass, field, fields, is_dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, get_args

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_TOKEN_FIXES = {"sq_ft": "sqft", "cap_ex": "capex", "use1031": "use_1031"}

DEFAULT_SCENARIO_NAME = "Untitled Analysis"


def field_name(name: str) -> str:
    """Normalise a camelCase or snake_case key to its snake_case field name."""
    snake = _CAMEL_BOUNDARY.sub("_", name).lower()
    for token, fixed in _TOKEN_FIXES.items():
        snake = snake.replace(token, fixed)
    return snake


def _coerce(current: Any, value: Any) -> Any:
    """Convert ``value`` to the type of the field value it replaces."""
    if value is None:
        return None
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int):
        whole = Decimal(str(value))
        if whole != whole.to_integral_value():
            raise ValueError(f"Expected a whole number, got {value!r}")
        return int(whole)
    if isinstance(current, Enum):
        return type(current)(value)
    return Decimal(str(value))


def _fill(cls, data: Mapping[str, Any] | None, **nested):
    """Build ``cls`` from partial data, one field at a time.

    Keys may be camelCase or snake_case. Missing keys keep the dataclass
    default, as do null keys unless the field is optional; unknown keys
    are ignored. ``nested`` supplies already-built values for
    dataclass-typed fields.
    """
    supplied = {field_name(key): value for key, value in (data or {}).items()}
    kwargs = {}
    for f in fields(cls):
        if f.name in nested:
            kwargs[f.name] = nested[f.name]
        elif f.name in supplied and f.default is not MISSING:
            value = supplied[f.name]
            if value is not None:
                kwargs[f.name] = _coerce(f.default, value)
            elif type(None) in get_args(f.type):
                kwargs[f.name] = None
    return cls(**kwargs)


class InputMode(Enum):
    SIMPLE = "simple"  # monthly gross rent, flat expense rates
    COMMERCIAL = "commercial"  # annual $/sf base rent, NNN expenses


@dataclass(frozen=True)
class Property:
    purchase_price: Decimal = Decimal("2000000")
    rehab_costs: Decimal = Decimal("0")
    after_repair_value: Decimal = Decimal("2000000")
    land_value_percent: Decimal = Decimal("20")  # Land is not depreciable
    building_size: Decimal = Decimal("10000")  # sq ft

    @property
    def land_value(self) -> Decimal:
        return self.purchase_price * self.land_value_percent / 100

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "Property":
        return _fill(cls, data)


@dataclass(frozen=True)
class Financing:
    down_payment_percent: Decimal = Decimal("25")
    interest_rate: Decimal = Decimal("7.0")  # Annual
    loan_term_years: int = 25

    def down_payment(self, purchase_price: Decimal) -> Decimal:
        return purchase_price * self.down_payment_percent / 100

    def loan_amount(self, purchase_price: Decimal) -> Decimal:
        return purchase_price - self.down_payment(purchase_price)

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "Financing":
        return _fill(cls, data)


@dataclass(frozen=True)
class CommercialExpenses:
    """NNN expense bundle. Per-sf figures are annual."""
    property_tax_per_sqft: Decimal = Decimal("1.50")
    insurance_per_sqft: Decimal = Decimal("0.75")
    cam_per_sqft: Decimal = Decimal("1.25")
    management_percent: Decimal = Decimal("4.0")  # % of EGI
    repairs_maintenance_annual: Decimal = Decimal("2500")  # Fixed, not grown
    capex_reserve_per_sqft: Decimal = Decimal("0.15")  # Fixed, not grown

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "CommercialExpenses":
        return _fill(cls, data)


@dataclass(frozen=True)
class _SharedOperations:
    vacancy_rate: Decimal = Decimal("5")
    annual_rent_growth: Decimal = Decimal("3")
    annual_expense_growth: Decimal = Decimal("2")
    initial_capex: Decimal = Decimal("25000")


@dataclass(frozen=True)
class SimpleOperations(_SharedOperations):
    gross_rent_monthly: Decimal = Decimal("4000")
    other_income_monthly: Decimal = Decimal("0")
    property_tax_rate: Decimal = Decimal("1.50")  # % of purchase price
    insurance_annual: Decimal = Decimal("1200")
    management_fee_rate: Decimal = Decimal("8")  # % of EGI
    maintenance_rate: Decimal = Decimal("5")  # % of EGI
    capex_rate: Decimal = Decimal("5")  # % of EGI

    @property
    def input_mode(self) -> InputMode:
        return InputMode.SIMPLE


@dataclass(frozen=True)
class CommercialOperations(_SharedOperations):
    annual_base_rent_per_sqft: Decimal = Decimal("18.00")
    other_income_percent: Decimal = Decimal("0")  # % of base rent
    commercial_expenses: CommercialExpenses = field(default_factory=CommercialExpenses)

    @property
    def input_mode(self) -> InputMode:
        return InputMode.COMMERCIAL


Operations = SimpleOperations | CommercialOperations


def operations_from_partial(data: Mapping[str, Any] | None = None) -> Operations:
    """Build the operations variant named by ``inputMode`` (default commercial)."""
    supplied = {field_name(key): value for key, value in (data or {}).items()}
    mode = InputMode(supplied.get("input_mode") or InputMode.COMMERCIAL.value)
    if mode is InputMode.SIMPLE:
        return _fill(SimpleOperations, supplied)

    expenses = {
        field_name(key): value
        for key, value in (supplied.get("commercial_expenses") or {}).items()
    }
    # Older scenarios keep the reserve at the operations level
    reserve = supplied.get("annual_capex_reserve_per_sqft")
    if reserve is not None:
        expenses.setdefault("capex_reserve_per_sqft", reserve)
    return _fill(
        CommercialOperations,
        supplied,
        commercial_expenses=CommercialExpenses.from_partial(expenses),
    )


@dataclass(frozen=True)
class TaxMarket:
    income_tax_rate: Decimal = Decimal("37")
    capital_gains_tax_rate: Decimal = Decimal("20")
    depreciation_years: Decimal = Decimal("39")  # Commercial; 27.5 residential
    depreciation_recapture_rate: Decimal = Decimal("25")
    selling_costs: Decimal = Decimal("3")  # % of sale price
    discount_rate: Decimal = Decimal("10")
    exit_cap_rate: Decimal | None = Decimal("6.5")  # 0 or None: appreciate instead
    hold_period: int = 10

    # Strategies
    use_1031_exchange: bool = False
    exchange_boot_percent: Decimal = Decimal("0")  # % of net proceeds taken as cash
    use_cost_segregation: bool = False
    cost_seg_year1_bonus: Decimal = Decimal("0")

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "TaxMarket":
        return _fill(cls, data)


@dataclass(frozen=True)
class ClosingCosts:
    """Buyer closing costs: four percentages of price plus a fixed fee."""
    title_insurance_percent: Decimal = Decimal("0.5")
    escrow_fees_percent: Decimal = Decimal("1.0")
    lender_fees_percent: Decimal = Decimal("1.0")
    recording_fees_percent: Decimal = Decimal("0.5")
    inspection_appraisal_fixed: Decimal = Decimal("2000")

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "ClosingCosts":
        return _fill(cls, data)


@dataclass(frozen=True)
class DealInputs:
    property: Property = field(default_factory=Property)
    financing: Financing = field(default_factory=Financing)
    operations: Operations = field(default_factory=CommercialOperations)
    tax_market: TaxMarket = field(default_factory=TaxMarket)
    closing_costs: ClosingCosts = field(default_factory=ClosingCosts)

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "DealInputs":
        supplied = {field_name(key): value for key, value in (data or {}).items()}
        return cls(
            property=Property.from_partial(supplied.get("property")),
            financing=Financing.from_partial(supplied.get("financing")),
            operations=operations_from_partial(supplied.get("operations")),
            tax_market=TaxMarket.from_partial(supplied.get("tax_market")),
            closing_costs=ClosingCosts.from_partial(supplied.get("closing_costs")),
        )

    def field_value(self, path: str) -> Any:
        """Value at a dotted field path (see ``with_field``)."""
        value = self
        for name in _split_path(path):
            _check_field(value, name)
            value = getattr(value, name)
        return value

    def with_field(self, path: str, value: Any) -> "DealInputs":
        """Copy of these inputs with one field replaced.

        ``path`` is dotted (``operations.vacancy_rate``) or a bare tax/market
        field (``exit_cap_rate``); camelCase segments are accepted. The value
        is converted to the type of the field it replaces.
        """
        return _replace_path(self, _split_path(path), value)


def _split_path(path: str) -> list[str]:
    names = [field_name(part) for part in path.split(".")]
    if len(names) == 1:
        names.insert(0, "tax_market")
    return names


def _check_field(obj: Any, name: str) -> None:
    if not is_dataclass(obj) or name not in {f.name for f in fields(obj)}:
        raise ValueError(f"Unknown field {name!r} on {type(obj).__name__}")


def _replace_path(obj: Any, names: list[str], value: Any) -> Any:
    name, rest = names[0], names[1:]
    _check_field(obj, name)
    current = getattr(obj, name)
    new_value = _replace_path(current, rest, value) if rest else _coerce(current, value)
    return replace(obj, **{name: new_value})


@dataclass(frozen=True)
class Scenario:
    """A named input bundle, as saved by the scenario library."""
    inputs: DealInputs = field(default_factory=DealInputs)
    name: str = DEFAULT_SCENARIO_NAME

    @classmethod
    def from_partial(cls, data: Mapping[str, Any] | None = None) -> "Scenario":
        data = data or {}
        name = data.get("scenarioName") or data.get("scenario_name") or data.get("name")
        return cls(inputs=DealInputs.from_partial(data), name=name or DEFAULT_SCENARIO_NAME)


@dataclass(frozen=True)
class LoanOption:
    """One financing option for the loan comparison calculator."""
    name: str
    interest_rate: Decimal
    term_years: int
    points: Decimal = Decimal("0")  # % of loan amount paid at closing
