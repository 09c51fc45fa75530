"""
Test Support Module

Builders for the text the bank portal produces when its pages are copied:
- account status page
- latest movements pages
- fund returns page
- a full run input stitching them together
"""

from tests.support.report_builders import (
    build_account_status,
    build_movements_page,
    build_fund_returns,
    build_run_input,
    yearly_row,
    periodic_row,
)

__all__ = [
    "build_account_status",
    "build_movements_page",
    "build_fund_returns",
    "build_run_input",
    "yearly_row",
    "periodic_row",
]
