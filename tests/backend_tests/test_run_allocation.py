"""
Tests for the allocation CLI (scripts/run_allocation.py).
"""

import pandas as pd
import pytest

from run_allocation import format_summary, main


def _write_inputs(path, with_bad_row=False):
    courses = [{"course_name": "A", "capacity": 1}, {"course_name": "B", "capacity": 1}]
    if with_bad_row:
        courses.append({"course_name": "A", "capacity": 4})
    pd.DataFrame(courses).to_csv(path / "courses.csv", index=False)
    pd.DataFrame([
        {"student_id": "s1", "average": 90},
        {"student_id": "s2", "average": 80},
    ]).to_csv(path / "students.csv", index=False)
    pd.DataFrame([
        {"student_id": "s1", "choice_1": "A", "choice_2": "B"},
        {"student_id": "s2", "choice_1": "A", "choice_2": "B"},
    ]).to_csv(path / "requests.csv", index=False)
    return str(path)


class TestMain:
    def test_prints_summary(self, tmp_path, capsys):
        path = _write_inputs(tmp_path)
        assert main(["--path", path]) == 0
        out = capsys.readouterr().out
        assert "Assigned: 2  Unassigned: 0" in out
        assert "A [1/1]: s1" in out
        assert "B [1/1]: s2" in out

    def test_repo_sample(self, sample_data_path, capsys):
        assert main(["--path", sample_data_path]) == 0
        out = capsys.readouterr().out
        assert "Not assigned: S1003, S1008" in out
        assert "2 student(s) without a seat" in out

    def test_missing_path(self, tmp_path, capsys):
        assert main(["--path", str(tmp_path / "missing")]) == 2
        assert "ERROR" in capsys.readouterr().err

    def test_strict_rejected_rows(self, tmp_path):
        path = _write_inputs(tmp_path, with_bad_row=True)
        assert main(["--path", path]) == 0
        assert main(["--path", path, "--strict"]) == 1

    def test_export_csv(self, tmp_path):
        path = _write_inputs(tmp_path)
        out_dir = tmp_path / "report"
        assert main(["--path", path, "--export", str(out_dir)]) == 0
        assignments = pd.read_csv(out_dir / "assignments.csv")
        assert assignments["student_id"].tolist() == ["s1", "s2"]
        counts = pd.read_csv(out_dir / "request_counts.csv")
        assert counts["rank_1"].tolist() == [2, 0]
        students = pd.read_csv(out_dir / "students.csv")
        assert students["assigned_rank"].tolist() == [1, 2]

    def test_export_xlsx(self, tmp_path):
        path = _write_inputs(tmp_path)
        out_file = tmp_path / "report.xlsx"
        assert main(["--path", path, "--export", str(out_file), "--format", "xlsx"]) == 0
        xl = pd.ExcelFile(out_file)
        assert xl.sheet_names == ["assignments", "request_counts", "students"]

    def test_bad_format_rejected(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--path", str(tmp_path), "--format", "pdf"])


class TestFormatSummary:
    def test_empty_course_marker(self):
        summary = {
            "total_students": 1,
            "students_with_requests": 0,
            "assigned": 0,
            "unassigned": 1,
            "success_rate_by_rank": {"1": 0.0, "2": 0.0, "3": 0.0},
            "courses": [{"course_name": "A", "capacity": 2, "enrolled": 0, "seats_left": 2}],
        }
        text = format_summary(summary, {"A": []}, ["s1"])
        assert "A [0/2]: -" in text
        assert "choice 1: 0.0%" in text
        assert "Not assigned: s1" in text
