import pytest

from school_erp.utils.grading import (
    calculate_percentage,
    grade_for_percentage,
    grade_marks,
    summarize_results,
)


@pytest.mark.parametrize(
    "percentage, grade",
    [
        (100, "A"),
        (90, "A"),
        (89.99, "B"),
        (80, "B"),
        (79.5, "C"),
        (70, "C"),
        (60, "D"),
        (50, "E"),
        (49.99, "F"),
        (0, "F"),
    ],
)
def test_grade_for_percentage_band_edges(percentage, grade):
    assert grade_for_percentage(percentage) == grade


def test_grade_marks_rounds_percentage_but_grades_on_exact_value():
    result = grade_marks(2, 3)
    assert result == {"marks_obtained": 2.0, "percentage": 66.67, "grade": "D"}


def test_grade_marks_just_below_a_boundary_stays_in_lower_band():
    # 89.996% rounds to 90.0 for display but is still a B
    result = grade_marks(89.996, 100)
    assert result["percentage"] == 90.0
    assert result["grade"] == "B"


def test_calculate_percentage_rejects_non_positive_total():
    with pytest.raises(ValueError):
        calculate_percentage(10, 0)


def test_summarize_results_empty():
    assert summarize_results([]) == {
        "totalExams": 0,
        "averagePercentage": "0",
        "highestGrade": None,
        "lowestGrade": None,
    }


def test_summarize_results_average_and_grade_range():
    results = [
        {"percentage": 92.0, "grade": "A"},
        {"percentage": 55.5, "grade": "E"},
        {"percentage": 71.25, "grade": "C"},
    ]
    summary = summarize_results(results)
    assert summary["totalExams"] == 3
    assert summary["averagePercentage"] == "72.92"
    assert summary["highestGrade"] == "A"
    assert summary["lowestGrade"] == "E"
