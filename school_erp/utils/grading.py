# school_erp/utils/grading.py
"""Percentage to letter-grade banding and result summaries."""
from typing import Dict, Iterable, Optional, Union

Number = Union[int, float]

# Inclusive lower bounds, checked top-down
GRADE_BANDS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
    (50, "E"),
)
FAILING_GRADE = "F"
GRADE_ORDER = ("A", "B", "C", "D", "E", "F")


def grade_for_percentage(percentage: Number) -> str:
    for threshold, grade in GRADE_BANDS:
        if percentage >= threshold:
            return grade
    return FAILING_GRADE


def calculate_percentage(marks_obtained: Number, total_marks: Number) -> float:
    if total_marks is None or total_marks <= 0:
        raise ValueError("total_marks must be greater than 0")
    return (float(marks_obtained) / float(total_marks)) * 100


def grade_marks(marks_obtained: Number, total_marks: Number) -> Dict[str, object]:
    """Percentage and letter grade for a raw mark."""
    percentage = calculate_percentage(marks_obtained, total_marks)
    return {
        "marks_obtained": float(marks_obtained),
        "percentage": round(percentage, 2),
        "grade": grade_for_percentage(percentage),
    }


def _grade_rank(grade: Optional[str]) -> int:
    return GRADE_ORDER.index(grade) if grade in GRADE_ORDER else len(GRADE_ORDER) - 1


def summarize_results(results: Iterable[Dict[str, object]]) -> Dict[str, object]:
    """
    Summary shown on the grades pages.

    Each result needs ``percentage`` and ``grade``. Highest/lowest follow
    A..F order; an unknown grade ranks as F.
    """
    results = list(results)
    if not results:
        return {
            "totalExams": 0,
            "averagePercentage": "0",
            "highestGrade": None,
            "lowestGrade": None,
        }

    percentages = [float(r.get("percentage") or 0) for r in results]
    ranks = [_grade_rank(r.get("grade")) for r in results]
    return {
        "totalExams": len(results),
        "averagePercentage": f"{sum(percentages) / len(percentages):.2f}",
        "highestGrade": GRADE_ORDER[min(ranks)],
        "lowestGrade": GRADE_ORDER[max(ranks)],
    }
