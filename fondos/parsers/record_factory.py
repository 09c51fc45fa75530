# fondos/parsers/record_factory.py
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import fondos.config as config
from fondos.domain.enums import ReturnPeriod
from fondos.domain.errors import UnrecognizedCategoryError
from fondos.domain.records import Action, FundValue
from fondos.utils.type_utils import parse_cents, parse_fund_name, parse_percent, parse_report_date
from .raw_models import RawBalanceRow, RawMovementRow, RawPeriodicReturnRow, RawYearlyReturnRow

logger = logging.getLogger(__name__)

_YEARLY_PERIODS = [ReturnPeriod.NEXT_TO_LAST_YEAR, ReturnPeriod.LAST_YEAR, ReturnPeriod.YEAR_TO_DATE]
_PERIODIC_PERIODS = [
    ReturnPeriod.DAY, ReturnPeriod.DAY_ANNUALIZED, ReturnPeriod.MONTH, ReturnPeriod.TRIMESTER,
    ReturnPeriod.SEMESTER, ReturnPeriod.YEAR, ReturnPeriod.TWO_YEARS, ReturnPeriod.TOTAL,
]


@dataclass
class BalanceObservation:
    fund_name: str
    balance: int


@dataclass
class ActionObservation:
    fund_name: str
    action: Action


@dataclass
class FundValueObservation:
    fund_name: str
    fund_value: FundValue
    returns: Dict[ReturnPeriod, float] = field(default_factory=dict)


@dataclass
class PeriodicReturnObservation:
    fund_name: str
    returns: Dict[ReturnPeriod, float] = field(default_factory=dict)


class RecordFactory:
    """
    Turns raw report rows into typed observations. Every field is parsed with the
    row context extended by the fields before it, so a FormatError names the
    line and all values read up to the failing one.
    """

    def __init__(self, action_label_signs: Optional[Dict[str, int]] = None):
        self.action_label_signs = action_label_signs if action_label_signs is not None else config.ACTION_LABEL_SIGNS

    def create_balance(self, raw: RawBalanceRow) -> BalanceObservation:
        context = raw.context().with_field("fund", raw.fund)
        fund_name = parse_fund_name(raw.fund, context)
        context = context.with_field("balance", raw.balance)
        return BalanceObservation(fund_name=fund_name, balance=parse_cents(raw.balance, context))

    def create_action(self, raw: RawMovementRow) -> ActionObservation:
        context = raw.context().with_field("date", raw.date)
        action_date = parse_report_date(raw.date, context)
        context = context.with_field("fund", raw.fund)
        fund_name = parse_fund_name(raw.fund, context)
        context = context.with_field("movement", raw.movement)
        sign = self.action_label_signs.get(raw.movement)
        if sign is None:
            known = ", ".join(f"'{label}'" for label in self.action_label_signs)
            raise UnrecognizedCategoryError(f"Movement not recognized, expected one of {known}", raw.movement, context)
        context = context.with_field("value", raw.value)
        amount = parse_cents(raw.value, context)
        return ActionObservation(fund_name=fund_name, action=Action(date=action_date, change=sign * amount))

    def create_fund_value(self, raw: RawYearlyReturnRow) -> FundValueObservation:
        context = raw.context().with_field("fund", raw.fund)
        fund_name = parse_fund_name(raw.fund, context)
        context = context.with_field("date", raw.date)
        value_date: date = parse_report_date(raw.date, context)
        context = context.with_field("fund_value", raw.fund_value)
        fund_value = parse_cents(raw.fund_value, context)
        context = context.with_field("unit_value", raw.unit_value)
        unit_value = parse_cents(raw.unit_value, context)
        returns = {}
        for period in _YEARLY_PERIODS:
            cell = getattr(raw, period.value)
            context = context.with_field(period.value, cell)
            returns[period] = parse_percent(cell, context)
        return FundValueObservation(
            fund_name=fund_name,
            fund_value=FundValue(date=value_date, fund_value=fund_value, unit_value=unit_value),
            returns=returns,
        )

    def create_periodic_returns(self, raw: RawPeriodicReturnRow) -> PeriodicReturnObservation:
        context = raw.context().with_field("fund", raw.fund)
        fund_name = parse_fund_name(raw.fund, context)
        returns = {}
        for period in _PERIODIC_PERIODS:
            cell = getattr(raw, period.value)
            context = context.with_field(period.value, cell)
            returns[period] = parse_percent(cell, context)
        return PeriodicReturnObservation(fund_name=fund_name, returns=returns)

    def create_balances(self, rows: List[RawBalanceRow]) -> List[BalanceObservation]:
        return [self.create_balance(r) for r in rows]

    def create_action_batches(self, pages: List[List[RawMovementRow]]) -> List[List[ActionObservation]]:
        return [[self.create_action(r) for r in page] for page in pages]
