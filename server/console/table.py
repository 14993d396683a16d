from typing import Any, Dict, Iterable, List, Optional

YEAR_FILTERS = [1, 2, 3, 4, 5]
SEMESTER_FILTERS = [1, 2]

# (title, field, numeric)
COLUMNS = [
    ("Full Name", "fullName", False),
    ("Email", "email", False),
    ("Year", "year", True),
    ("Semester", "semester", True),
]
SORTABLE = {field: numeric for _, field, numeric in COLUMNS}

ROW_KEY = "email"


def _sort_key(field: str, numeric: bool):
    def key(student: Dict[str, Any]):
        value = student[field]
        if numeric:
            try:
                return (0, float(value), "")
            except (TypeError, ValueError):
                return (1, 0, str(value))
        text = str(value)
        return (0, 0, (text.casefold(), text))
    return key


def sort_students(students: Iterable[Dict[str, Any]], field: str, descending: bool = False) -> List[Dict[str, Any]]:
    """Order rows by one column; records missing the field go last."""
    if field not in SORTABLE:
        raise ValueError(f"Cannot sort by {field!r}")
    rows = list(students)
    present = [s for s in rows if s.get(field) is not None]
    missing = [s for s in rows if s.get(field) is None]
    present.sort(key=_sort_key(field, SORTABLE[field]), reverse=descending)
    return present + missing


def filter_students(
    students: Iterable[Dict[str, Any]],
    years: Optional[Iterable[int]] = None,
    semesters: Optional[Iterable[int]] = None,
) -> List[Dict[str, Any]]:
    """Keep rows whose year is one of ``years`` and semester one of ``semesters``.

    An empty or missing selection does not filter that column.
    """
    years = set(years or ())
    semesters = set(semesters or ())
    return [
        s for s in students
        if (not years or s.get("year") in years)
        and (not semesters or s.get("semester") in semesters)
    ]


def table_rows(
    students: Iterable[Dict[str, Any]],
    sort: Optional[str] = None,
    order: str = "ascend",
    years: Optional[Iterable[int]] = None,
    semesters: Optional[Iterable[int]] = None,
) -> List[Dict[str, Any]]:
    rows = filter_students(students, years, semesters)
    if sort in SORTABLE:
        rows = sort_students(rows, sort, descending=order == "descend")
    return rows
