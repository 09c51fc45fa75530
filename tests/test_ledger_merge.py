# tests/test_ledger_merge.py
import math
from datetime import date

import pytest

from fondos.domain.enums import ReturnPeriod
from fondos.domain.errors import FormatError, UnrecognizedCategoryError
from fondos.domain.ledger import Ledger
from fondos.domain.records import FundValue
from fondos.engine.merge_engine import LedgerMerger, merge_fund_returns
from fondos.parsers.line_source import LineSource
from fondos.parsers.parsing_orchestrator import ParsingOrchestrator
from fondos.parsers.record_factory import (
    BalanceObservation, FundValueObservation, PeriodicReturnObservation
)
from tests.support import (
    build_account_status, build_fund_returns, build_movements_page, build_run_input, periodic_row, yearly_row
)

RUN_DATE = date(2024, 3, 1)


class TestBalanceMerge:

    def setup_method(self):
        self.ledger = Ledger()
        self.merger = LedgerMerger(self.ledger, RUN_DATE)

    def test_first_observation_is_added(self):
        outcome = self.merger.merge_balances([BalanceObservation("Fondo Renta Fija", 100000)])
        series = self.ledger.find_series("fondo renta fija")
        assert outcome.records_added == 1
        assert outcome.series_created == ["fondo renta fija"]
        assert [(b.date, b.balance) for b in series.balances] == [(RUN_DATE, 100000)]

    def test_same_value_twice_is_a_no_op(self):
        self.merger.merge_balances([BalanceObservation("Fondo Renta Fija", 100000)])
        outcome = self.merger.merge_balances([BalanceObservation("FONDO RENTA FIJA", 100000)])
        assert outcome.records_added == 0
        assert outcome.records_updated == 0
        assert outcome.warnings == []
        assert len(self.ledger.find_series("fondo renta fija").balances) == 1

    def test_changed_value_overwrites_with_warning(self):
        """A different balance for the same fund and run date replaces the stored one."""
        self.merger.merge_balances([BalanceObservation("Fondo Renta Fija", 100000)])
        outcome = self.merger.merge_balances([BalanceObservation("Fondo Renta Fija", 100500)])
        assert outcome.records_updated == 1
        assert len(outcome.warnings) == 1
        warning = outcome.warnings[0]
        assert warning.previous_value == "$1,000.00"
        assert warning.new_value == "$1,005.00"
        assert "fondo renta fija" in warning.message()
        assert self.ledger.find_series("fondo renta fija").balance_on(RUN_DATE).balance == 100500

    def test_other_dates_are_not_touched(self):
        LedgerMerger(self.ledger, date(2024, 2, 1)).merge_balances([BalanceObservation("Fondo A", 1)])
        self.merger.merge_balances([BalanceObservation("Fondo A", 2)])
        balances = self.ledger.find_series("fondo a").balances
        assert [(b.date, b.balance) for b in balances] == [(date(2024, 2, 1), 1), (RUN_DATE, 2)]


class TestFundValueMerge:

    def setup_method(self):
        self.ledger = Ledger()
        self.merger = LedgerMerger(self.ledger, RUN_DATE)

    def observation(self, fund_value, unit_value, on=date(2024, 2, 29)):
        return FundValueObservation("Fondo Renta Fija", FundValue(on, fund_value, unit_value))

    def test_fund_value_keyed_by_report_date(self):
        self.merger.merge_fund_values([self.observation(500000000, 1234567)])
        stored = self.ledger.find_series("fondo renta fija").fund_values
        assert [(v.date, v.fund_value, v.unit_value) for v in stored] == [(date(2024, 2, 29), 500000000, 1234567)]

    def test_repeat_is_a_no_op_and_change_warns(self):
        self.merger.merge_fund_values([self.observation(500000000, 1234567)])
        repeat = self.merger.merge_fund_values([self.observation(500000000, 1234567)])
        changed = self.merger.merge_fund_values([self.observation(500000000, 1234600)])
        assert repeat.records_added == 0 and repeat.warnings == []
        assert changed.records_updated == 1
        assert changed.warnings[0].record_kind == "Fund value"
        assert self.ledger.find_series("fondo renta fija").fund_values[0].unit_value == 1234600


class TestFundReturnsMerge:

    def test_tables_merge_per_fund_and_missing_is_nan(self):
        yearly = [FundValueObservation(
            "Fondo Renta Fija", FundValue(date(2024, 2, 29), 1, 1),
            returns={ReturnPeriod.NEXT_TO_LAST_YEAR: 5.1, ReturnPeriod.LAST_YEAR: math.nan,
                     ReturnPeriod.YEAR_TO_DATE: 1.3},
        )]
        periodic = [
            PeriodicReturnObservation("FONDO RENTA FIJA", returns={ReturnPeriod.DAY: 0.01}),
            PeriodicReturnObservation("Fondo Acciones", returns={ReturnPeriod.TOTAL: -2.5}),
        ]
        report = merge_fund_returns(yearly, periodic)
        assert sorted(report.by_fund) == ["fondo acciones", "fondo renta fija"]

        renta_fija = report.by_fund["fondo renta fija"]
        assert renta_fija.roe_next_to_last_year == 5.1
        assert renta_fija.roe_day == 0.01
        assert math.isnan(renta_fija.roe_last_year)
        assert math.isnan(renta_fija.roe_month)
        assert renta_fija.observed_periods() == [
            ReturnPeriod.NEXT_TO_LAST_YEAR, ReturnPeriod.YEAR_TO_DATE, ReturnPeriod.DAY,
        ]

        acciones = report.by_fund["fondo acciones"]
        assert acciones.roe_total == -2.5
        assert math.isnan(acciones.roe_year_to_date)


class TestOrchestratorPasses:

    def setup_method(self):
        self.ledger = Ledger()
        self.orchestrator = ParsingOrchestrator(self.ledger, RUN_DATE)

    def test_full_input_populates_every_record_kind(self):
        lines = build_run_input(
            account_status=build_account_status([("Fondo Renta Fija", "$1,000.00")]),
            movement_pages=[build_movements_page([("28/02/2024", "Fondo Renta Fija", "Aporte", "$100.00")])],
            fund_returns=build_fund_returns(
                [yearly_row("Fondo Renta Fija", "29/02/2024", "$5,000,000.00", "$12,345.67", "5.1 %", "NA", "1.3 %")],
                [periodic_row("Fondo Renta Fija", "0.01 %EA")],
            ),
        )
        outcome, report = self.orchestrator.run_ingestion(lines)
        series = self.ledger.find_series("fondo renta fija")
        assert [b.balance for b in series.balances] == [100000]
        assert [(a.date, a.change) for a in series.actions] == [(date(2024, 2, 28), 10000)]
        assert [v.unit_value for v in series.fund_values] == [1234567]
        assert outcome.records_added == 3
        assert report.by_fund["fondo renta fija"].roe_day == 0.01
        assert report.by_fund["fondo renta fija"].roe_year_to_date == 1.3

    def test_withdrawal_labels_are_negative(self):
        lines = build_run_input(movement_pages=[build_movements_page([
            ("01/03/2024", "Fondo Liquidez", "Aporte por traslado a otro portafolio", "$250.00"),
            ("01/03/2024", "Fondo Dólar", "Aporte por traslado de otro portafolio", "$250.00"),
            ("01/03/2024", "Fondo Liquidez", "Retiro parcial", "$10.00"),
        ])])
        self.orchestrator.run_ingestion(lines)
        assert [a.change for a in self.ledger.find_series("fondo liquidez").actions] == [-25000, -1000]
        assert [a.change for a in self.ledger.find_series("fondo dólar").actions] == [25000]

    def test_bad_balance_aborts_the_pass_before_merging(self):
        """The first row is valid but nothing from the page is merged."""
        lines = build_run_input(account_status=build_account_status([
            ("Fondo Renta Fija", "$1,000.00"),
            ("Fondo Acciones", "$1,0.00"),
        ]))
        with pytest.raises(FormatError, match="account status, line 6"):
            self.orchestrator.ingest_account_status(LineSource(lines))
        assert len(self.ledger) == 0

    def test_unknown_movement_leaves_actions_untouched(self):
        lines = build_run_input(
            account_status=build_account_status([("Fondo Renta Fija", "$1,000.00")]),
            movement_pages=[build_movements_page([
                ("28/02/2024", "Fondo Renta Fija", "Aporte", "$100.00"),
                ("29/02/2024", "Fondo Renta Fija", "Rendimientos", "$1.00"),
            ])],
        )
        with pytest.raises(UnrecognizedCategoryError) as exc_info:
            self.orchestrator.run_ingestion(lines)
        assert exc_info.value.raw == "Rendimientos"
        assert "Retiro parcial" in str(exc_info.value)
        assert self.ledger.find_series("fondo renta fija").actions == []

    def test_prompts_are_announced_per_section(self):
        prompts = []
        ParsingOrchestrator(Ledger(), RUN_DATE, prompt=prompts.append).run_ingestion(build_run_input())
        assert len(prompts) == 3
        assert "account status" in prompts[0]
