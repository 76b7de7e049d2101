"""
Data structures shared by the alignment engine.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Observation:
    """
    A single dated value parsed from an upstream series.

    Attributes:
        date: Observation date
        value: Published value, NaN when the release slot has none
        valid: Whether a value was published
        estimated: Upstream provenance flag, False for every parsed record;
            provenance of derived values lives on AlignedPoint
    """
    date: date
    value: float
    valid: bool = True
    estimated: bool = False

    @classmethod
    def missing(cls, obs_date: date) -> "Observation":
        """Observation for a release slot with no published value."""
        return cls(obs_date, math.nan, valid=False)


@dataclass(frozen=True)
class AlignedPoint:
    """A series value placed on one anchor date, tagged with its provenance."""
    date: date
    value: float
    estimated: bool = False
    interpolated: bool = False
    estimation_method: Optional[str] = None
    monthly_growth_rate: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "date": self.date.isoformat(),
            "value": self.value,
            "estimated": self.estimated,
            "interpolated": self.interpolated,
        }
        if self.estimation_method is not None:
            out["estimation_method"] = self.estimation_method
        if self.monthly_growth_rate is not None:
            # Reported in percent
            out["monthly_growth_rate"] = round(self.monthly_growth_rate * 100, 4)
        return out


@dataclass(frozen=True)
class EstimationDetails:
    """Which inputs of a cost entry were estimated."""
    price_estimated: bool
    rate_estimated: bool
    income_estimated: bool

    @property
    def any(self) -> bool:
        return self.price_estimated or self.rate_estimated or self.income_estimated

    def to_dict(self) -> Dict[str, bool]:
        return {
            "price_estimated": self.price_estimated,
            "rate_estimated": self.rate_estimated,
            "income_estimated": self.income_estimated,
        }


@dataclass(frozen=True)
class CostEntry:
    """
    Affordability metrics for one household profile on one anchor date.

    Attributes:
        type: Household profile, ``"single"`` or ``"household"``
        date: Anchor date
        total_cost: Total amount paid over the life of the loan
        income: Annual income of the profile
        cost_to_income: Total cost over annual income, formatted with 2 decimals
        home_price: House price used for the loan principal
        mortgage_rate: Annual mortgage rate in percent, formatted with 2 decimals
        estimation_details: Per-input estimation flags, set only when estimated
    """
    type: str
    date: date
    total_cost: int
    income: int
    cost_to_income: str
    home_price: int
    mortgage_rate: str
    estimation_details: Optional[EstimationDetails] = None

    @property
    def estimated(self) -> bool:
        return self.estimation_details is not None and self.estimation_details.any

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the report layout consumed by the chart front-end."""
        out: Dict[str, Any] = {
            "type": self.type,
            "date": self.date.isoformat(),
            "total_cost": self.total_cost,
            f"{self.type}_income": self.income,
            "cost_to_income": self.cost_to_income,
            "home_price": self.home_price,
            "mortgage_rate": self.mortgage_rate,
        }
        if self.estimated:
            out["estimated"] = True
            out["estimation_details"] = self.estimation_details.to_dict()
        return out


@dataclass
class AffordabilityResult:
    """Container for the two index-aligned cost series."""
    single_costs: List[CostEntry] = field(default_factory=list)
    household_costs: List[CostEntry] = field(default_factory=list)
    skipped_dates: List[date] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.single_costs)
