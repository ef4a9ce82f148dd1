import io

from timecolor.grid import Cell, SlotGrid
from timecolor.io_utils import grid_frame, load_items, write_grid_csv
from timecolor.models import ItemKind, LabMode

ITEMS_CSV = """code,name,priority,theory_hours,lab_hours,lab_mode,kind,personnel,groups,department,venue
DM,Discrete Mathematics,1,4,2,1,academic,Prof. Smith;Prof. Johnson,CS-A;CS-B,,Room 101
FB,Football Final,2,2,0,,sports,Coach Lee,,,Stadium
"""


def test_load_items_from_text():
    items = load_items(io.StringIO(ITEMS_CSV))
    assert [it.code for it in items] == ["DM", "FB"]
    dm, fb = items
    assert dm.personnel == ["Prof. Smith", "Prof. Johnson"]
    assert dm.groups == ["CS-A", "CS-B"]
    assert dm.lab_mode == LabMode.COMBINED
    assert dm.department is None
    assert fb.kind == ItemKind.SPORTS
    assert fb.lab_mode == LabMode.NONE
    assert fb.groups is None
    assert fb.venue == "Stadium"


def test_load_items_from_bytes():
    items = load_items(io.BytesIO(ITEMS_CSV.encode("utf-8")))
    assert items[0].theory_hours == 4


def _grid():
    grid = SlotGrid()
    grid.put(0, 0, Cell("DM", "Prof. Smith", is_lab=True))
    grid.put(0, 1, Cell("DM", "Prof. Smith", is_lab=True))
    grid.put(1, 5, Cell("DS", "Prof. Brown"))
    return grid


def test_grid_frame_layout():
    frame = grid_frame(_grid())
    assert frame.shape == (5, 6)
    assert list(frame.columns) == ["H1", "H2", "H3", "H4", "H5", "H6"]
    assert frame.loc["Tuesday", "H6"] == "DS - Prof. Brown"
    assert frame.loc["Friday", "H1"] == "FREE"


def test_grid_csv_export():
    out = io.StringIO()
    write_grid_csv(out, _grid(), "Division 1")
    lines = out.getvalue().splitlines()
    assert lines[0] == "Division 1 Timetable"
    assert lines[1] == "Day,H1,H2,H3,H4,H5,H6"
    assert lines[2] == "Monday,DM(Lab) - Prof. Smith,DM(Lab) - Prof. Smith,FREE,FREE,FREE,FREE"
    assert lines[3] == "Tuesday,FREE,FREE,FREE,FREE,FREE,DS - Prof. Brown"
    assert len(lines) == 7
