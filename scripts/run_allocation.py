"""
Run one elective allocation from tabular data and report the outcome.

Loads courses, students and ranked requests (CSV directory or xlsx
workbook), runs the single allocation pass, prints a summary and can
export assignments, request counts and per-student outcomes.

Usage:
    python scripts/run_allocation.py
    python scripts/run_allocation.py --path path/to/data_dir
    python scripts/run_allocation.py --path electives.xlsx --export out/ --format csv
    python scripts/run_allocation.py --path data --export report.xlsx --format xlsx --strict
"""

import argparse
import os
import sys

from workbook_io import resolve_default_path, write_csv_dir, write_workbook

_EXPORT_ORDER = ["assignments", "request_counts", "students"]


def format_summary(summary: dict, assignments: dict, unassigned: list) -> str:
    lines = [
        f"Students: {summary['total_students']} "
        f"(with requests: {summary['students_with_requests']})",
        f"Assigned: {summary['assigned']}  Unassigned: {summary['unassigned']}",
    ]
    for rank, rate in summary["success_rate_by_rank"].items():
        lines.append(f"  choice {rank}: {rate:.1%}")
    lines.append("Courses:")
    for course in summary["courses"]:
        roster = ", ".join(assignments.get(course["course_name"], [])) or "-"
        lines.append(
            f"  {course['course_name']} [{course['enrolled']}/{course['capacity']}]: {roster}"
        )
    if unassigned:
        lines.append(f"Not assigned: {', '.join(unassigned)}")
    return "\n".join(lines)


def export_report(manager, out_path: str, fmt: str) -> list[str]:
    import reports

    sheets = {
        "assignments": reports.assignments_frame(manager.courses),
        "request_counts": reports.request_counts_frame(manager.courses, manager.students),
        "students": reports.students_frame(manager.students),
    }
    if fmt == "xlsx":
        write_workbook(out_path, _EXPORT_ORDER, sheets)
        return [out_path]
    return write_csv_dir(out_path, _EXPORT_ORDER, sheets)


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Allocate students to elective courses by grade average and ranked choices.",
    )
    parser.add_argument(
        "--path", type=str,
        default=resolve_default_path("..", "data"),
        help="CSV directory or xlsx workbook with courses/students/requests.",
    )
    parser.add_argument("--export", type=str, help="Write the report to this directory (csv) or file (xlsx).")
    parser.add_argument("--format", choices=["csv", "xlsx"], default="csv", help="Export format.")
    parser.add_argument(
        "--strict", action="store_true",
        help="Exit with status 1 when any input row was rejected.",
    )
    opts = parser.parse_args(args)

    # Import backend modules (add backend/ to path)
    backend_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend")
    sys.path.insert(0, backend_dir)
    from data_loader import build_manager, load_data

    try:
        data = load_data(opts.path)
    except (FileNotFoundError, ValueError) as exc:
        print(f"[run-allocation] ERROR: {exc}", file=sys.stderr, flush=True)
        return 2

    manager, rejected = build_manager(data)
    unassigned_count = manager.allocate()

    print(format_summary(manager.summary(), manager.assignments(), manager.unassigned()))
    print(f"[run-allocation] {unassigned_count} student(s) without a seat.", flush=True)

    if opts.export:
        for dest in export_report(manager, opts.export, opts.format):
            print(f"[OK]   wrote {dest}")

    if rejected:
        print(f"[run-allocation] {len(rejected)} input row(s) rejected.", file=sys.stderr, flush=True)
        if opts.strict:
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
