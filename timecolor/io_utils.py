import csv
import io
import os
from typing import IO, List, Union

import pandas as pd

from .grid import SlotGrid
from .models import DAY_NAMES, Item, ItemKind, LabMode

TextOrPath = Union[str, os.PathLike, IO]

_LAB_TYPES = {"0": LabMode.NONE, "1": LabMode.COMBINED, "2": LabMode.PER_BATCH}


def _open_text(src: TextOrPath):
    """Return a text-mode file handle and a flag indicating whether to close it.

    Accepts a filesystem path, a text IO object, or a BytesIO buffer.
    """
    if isinstance(src, (str, os.PathLike)):
        f = open(src, 'r', newline='')
        return f, True
    if isinstance(src, io.BytesIO):
        src.seek(0)
        f = io.TextIOWrapper(src, encoding='utf-8', newline='')
        return f, True
    if hasattr(src, 'read'):
        if hasattr(src, 'seek'):
            src.seek(0)
        return src, False
    raise TypeError("Unsupported input type; expected path or file-like object")


def _split(value) -> List[str]:
    if not value:
        return []
    return [v.strip() for v in str(value).replace(';', ',').split(',') if v.strip()]


def load_items(src: TextOrPath) -> List[Item]:
    """Read items from CSV.

    Columns: code, name, personnel, and optionally priority, theory_hours,
    lab_hours, lab_mode, kind, groups, department, venue. List columns are
    separated by ';' or ','.
    """
    items: List[Item] = []
    f, should_close = _open_text(src)
    try:
        r = csv.DictReader(f)
        for row in r:
            lab_mode = str(row.get('lab_mode') or 'none').strip()
            items.append(Item(
                code=str(row['code']).strip(),
                name=str(row.get('name') or row['code']).strip(),
                personnel=_split(row.get('personnel')),
                priority=int(row.get('priority') or 1),
                theory_hours=int(row.get('theory_hours') or 0),
                lab_hours=int(row.get('lab_hours') or 0),
                lab_mode=_LAB_TYPES[lab_mode] if lab_mode in _LAB_TYPES else LabMode(lab_mode),
                kind=ItemKind(str(row.get('kind') or 'academic').strip()),
                groups=_split(row.get('groups')) or None,
                department=(row.get('department') or '').strip() or None,
                venue=(row.get('venue') or '').strip() or None,
            ))
    finally:
        if should_close:
            f.close()
    return items


def cell_label(grid: SlotGrid, day: int, hour: int) -> str:
    occupants = grid.occupants(day, hour)
    if not occupants:
        return "FREE"
    return " / ".join(f"{c.item_code}{'(Lab)' if c.is_lab else ''} - {c.personnel}" for c in occupants)


def grid_frame(grid: SlotGrid) -> pd.DataFrame:
    """One row per day, one column per hour slot, ready for table rendering."""
    rows = [[cell_label(grid, d, h) for h in range(grid.hours)] for d in range(grid.days)]
    return pd.DataFrame(rows, index=pd.Index(DAY_NAMES[:grid.days], name="Day"),
                        columns=[f"H{h + 1}" for h in range(grid.hours)])


def write_grid_csv(out: IO, grid: SlotGrid, division: str):
    out.write(f"{division} Timetable\n")
    grid_frame(grid).to_csv(out, lineterminator='\n')


def save_grid_csv(path: str, grid: SlotGrid, division: str):
    with open(path, 'w', newline='') as f:
        write_grid_csv(f, grid, division)
