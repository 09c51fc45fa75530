"""
Test Fixtures Module

Reconciliation scenarios are kept as YAML (reconciliation_scenarios.yaml):
each scenario lists the actions already stored, the movement pages pasted
afterwards and the multiset the ledger must hold at the end. Dates are plain
YAML dates; amounts are integer cents.

Use load_yaml_spec() to read a file and parse_reconciliation_scenarios() to
turn it into ReconciliationScenario objects for pytest.mark.parametrize.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import date
import yaml


FIXTURES_DIR = Path(__file__).parent


@dataclass
class ActionSpec:
    """One movement row, or one stored action, from a YAML scenario."""
    fund: str
    date: date
    change: int


@dataclass
class ExpectedActionSpec:
    fund: str
    date: date
    change: int
    count: int


@dataclass
class ReconciliationScenario:
    id: str
    description: str
    stored: List[ActionSpec]
    batches: List[List[ActionSpec]]
    expected: List[ExpectedActionSpec]
    expected_funds: Optional[List[str]] = None
    notes: Optional[str] = None
    tags: List[str] = field(default_factory=list)


def _parse_action(action_dict: Dict) -> ActionSpec:
    """Parse an action dictionary into ActionSpec."""
    return ActionSpec(
        fund=action_dict["fund"],
        date=action_dict["date"],
        change=int(action_dict["change"]),
    )


def _parse_expected(expected_dict: Dict) -> ExpectedActionSpec:
    return ExpectedActionSpec(
        fund=expected_dict["fund"],
        date=expected_dict["date"],
        change=int(expected_dict["change"]),
        count=int(expected_dict["count"]),
    )


def load_yaml_spec(filename: str) -> Dict[str, Any]:
    """
    Load a YAML fixture file.

    Args:
        filename: Name of the YAML file in the fixtures directory

    Returns:
        Parsed YAML content as a dictionary
    """
    filepath = FIXTURES_DIR / filename
    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_reconciliation_scenarios(spec_data: Dict[str, Any]) -> List[ReconciliationScenario]:
    scenarios = []
    for scenario_dict in spec_data.get("scenarios", []):
        scenarios.append(ReconciliationScenario(
            id=scenario_dict["id"],
            description=scenario_dict["description"],
            stored=[_parse_action(a) for a in scenario_dict.get("stored", [])],
            batches=[[_parse_action(a) for a in batch] for batch in scenario_dict.get("batches", [])],
            expected=[_parse_expected(e) for e in scenario_dict.get("expected", [])],
            expected_funds=scenario_dict.get("expected_funds"),
            notes=scenario_dict.get("notes"),
            tags=scenario_dict.get("tags", []),
        ))
    return scenarios


def get_reconciliation_scenarios() -> List[ReconciliationScenario]:
    """Load and parse the action reconciliation scenarios."""
    return parse_reconciliation_scenarios(load_yaml_spec("reconciliation_scenarios.yaml"))
