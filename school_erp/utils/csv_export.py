# school_erp/utils/csv_export.py
"""CSV rendering for attendance and exam-result exports."""
from typing import Any, Dict, Iterable, List, Sequence, Tuple
import pandas as pd

ATTENDANCE_COLUMNS: List[Tuple[str, str]] = [
    ("Roll Number", "roll_number"),
    ("Student Name", "student_name"),
    ("Date", "date"),
    ("Status", "status"),
    ("Remarks", "remarks"),
]

EXAM_RESULT_COLUMNS: List[Tuple[str, str]] = [
    ("Username", "username"),
    ("Student Name", "student_name"),
    ("Marks Obtained", "marks_obtained"),
    ("Percentage", "percentage"),
    ("Grade", "grade"),
]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def rows_to_csv(records: Iterable[Dict[str, Any]], columns: Sequence[Tuple[str, str]]) -> str:
    """One header row, then one row per record with fields in column order."""
    headers = [header for header, _ in columns]
    rows = [[_cell(record.get(field)) for _, field in columns] for record in records]
    df = pd.DataFrame(rows, columns=headers, dtype=str)
    return df.to_csv(index=False, lineterminator="\n")


def attendance_to_csv(records: Iterable[Dict[str, Any]]) -> str:
    return rows_to_csv(records, ATTENDANCE_COLUMNS)


def exam_results_to_csv(records: Iterable[Dict[str, Any]]) -> str:
    return rows_to_csv(records, EXAM_RESULT_COLUMNS)


def attendance_filename(class_id: Any, day: Any) -> str:
    return f"attendance_{class_id}_{day}.csv"


def exam_results_filename(exam_id: Any) -> str:
    return f"exam_{exam_id}_results.csv"
