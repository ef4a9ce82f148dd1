import pytest

from timecolor.models import EngineParams, Item, ItemKind, LabMode


@pytest.fixture()
def demo_items():
    return [
        Item(code="DM", name="Discrete Mathematics", priority=1, theory_hours=4, lab_hours=2,
             lab_mode=LabMode.COMBINED, personnel=["Prof. Smith", "Prof. Johnson"],
             groups=["CS-A", "CS-B"], venue="Room 101"),
        Item(code="DS", name="Data Structures", priority=2, theory_hours=3, lab_hours=2,
             lab_mode=LabMode.COMBINED, personnel=["Prof. Brown", "Prof. Smith"],
             groups=["CS-A", "IT-A"], venue="Lab 201"),
        Item(code="DB", name="Database Systems", priority=3, theory_hours=3, lab_hours=4,
             lab_mode=LabMode.PER_BATCH, personnel=["Prof. Wilson", "Prof. Taylor"],
             groups=["CS-B", "IT-B"], venue="Lab 202"),
    ]


@pytest.fixture()
def fixtures():
    """Two same-priority football fixtures at one stadium, final listed first."""
    return [
        Item(code="FB-F", name="Football Final", priority=1, theory_hours=2, kind=ItemKind.SPORTS,
             personnel=["Coach Lee"], groups=["Team A", "Team B"], venue="Stadium"),
        Item(code="FB-SF", name="Football Semi-Final", priority=1, theory_hours=2, kind=ItemKind.SPORTS,
             personnel=["Coach Kim"], groups=["Team C", "Team D"], venue="Stadium"),
    ]


@pytest.fixture()
def scan_params():
    return EngineParams(probe="scan", seed=0)
