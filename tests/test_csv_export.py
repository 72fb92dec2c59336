from school_erp.models.enums import AttendanceStatus
from school_erp.utils.csv_export import (
    attendance_filename,
    attendance_to_csv,
    exam_results_filename,
    exam_results_to_csv,
)


def test_attendance_csv_header_and_rows():
    csv = attendance_to_csv([
        {
            "roll_number": "001",
            "student_name": "Amina Njeri",
            "date": "2026-03-02",
            "status": AttendanceStatus.PRESENT,
            "remarks": None,
        },
        {
            "roll_number": "002",
            "student_name": "Otieno, Brian",
            "date": "2026-03-02",
            "status": "late",
            "remarks": "Bus delayed",
        },
    ])
    lines = csv.splitlines()
    assert lines[0] == "Roll Number,Student Name,Date,Status,Remarks"
    assert lines[1] == "001,Amina Njeri,2026-03-02,present,"
    assert lines[2] == '002,"Otieno, Brian",2026-03-02,late,Bus delayed'


def test_exam_results_csv_keeps_roll_numbers_as_text():
    csv = exam_results_to_csv([
        {"username": "NHS482-ST-10000001", "student_name": "Amina", "marks_obtained": 45.0,
         "percentage": 90.0, "grade": "A"},
    ])
    assert csv.splitlines() == [
        "Username,Student Name,Marks Obtained,Percentage,Grade",
        "NHS482-ST-10000001,Amina,45.0,90.0,A",
    ]


def test_empty_export_is_header_only():
    assert attendance_to_csv([]).splitlines() == ["Roll Number,Student Name,Date,Status,Remarks"]


def test_filenames():
    assert attendance_filename("c1", "2026-03-02") == "attendance_c1_2026-03-02.csv"
    assert exam_results_filename("e9") == "exam_e9_results.csv"
