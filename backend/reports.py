"""
Read-only projections over registry state.

None of these functions mutate a course or a student. They are meaningful
after the allocation pass; request_counts is also valid before it.
"""

import pandas as pd

from errors import InvalidInputError
from rules import MAX_CHOICES, RANKS


def _roster_key(student):
    return (-student.average, student.student_id)


def request_counts(courses, students) -> dict[str, list[int]]:
    """
    Number of students listing each course at each rank.

    Returns {course_name: [n_rank1, n_rank2, n_rank3]} for every course,
    in course-name order. Unrequested courses report zeros.
    """
    counts = {name: [0] * MAX_CHOICES for name in courses.list_names()}
    for student in students:
        for idx, course in enumerate(student.requests):
            counts[course.name][idx] += 1
    return counts


def assignments(courses) -> dict[str, list[str]]:
    """Enrolled student ids per course, highest average first."""
    out: dict[str, list[str]] = {}
    for name in courses.list_names():
        roster = sorted(courses.get(name).roster, key=_roster_key)
        out[name] = [s.student_id for s in roster]
    return out


def success_rate(students, rank: int) -> float:
    """
    Share of all loaded students assigned to their rank-th choice.

    Returns 0.0 when no student is loaded.
    """
    if isinstance(rank, bool) or not isinstance(rank, int) or rank not in RANKS:
        raise InvalidInputError(f"Rank must be an integer between 1 and {MAX_CHOICES}, got {rank!r}.")
    total = 0
    hits = 0
    for student in students:
        total += 1
        if student.assigned_rank() == rank:
            hits += 1
    if total == 0:
        return 0.0
    return hits / total


def unassigned(students) -> list[str]:
    return [s.student_id for s in students if not s.is_assigned()]


def allocation_summary(courses, students) -> dict:
    """Headline numbers for one allocation run."""
    total = len(students)
    missing = unassigned(students)
    course_fill = []
    for name in courses.list_names():
        course = courses.get(name)
        course_fill.append({
            "course_name": name,
            "capacity": course.capacity,
            "enrolled": len(course.roster),
            "seats_left": course.seats_left(),
        })
    return {
        "total_students": total,
        "students_with_requests": sum(1 for s in students if s.has_requests()),
        "assigned": total - len(missing),
        "unassigned": len(missing),
        "success_rate_by_rank": {str(rank): success_rate(students, rank) for rank in RANKS},
        "courses": course_fill,
    }


# ── Export frames ──────────────────────────────────────────────────────────────

def assignments_frame(courses) -> pd.DataFrame:
    """One row per seat: course_name, seat (1-based), student_id, average."""
    rows = []
    for name in courses.list_names():
        roster = sorted(courses.get(name).roster, key=_roster_key)
        for seat, student in enumerate(roster, start=1):
            rows.append({
                "course_name": name,
                "seat": seat,
                "student_id": student.student_id,
                "average": student.average,
            })
    return pd.DataFrame(rows, columns=["course_name", "seat", "student_id", "average"])


def request_counts_frame(courses, students) -> pd.DataFrame:
    """One row per course with a column per rank and the course capacity."""
    rank_cols = [f"rank_{rank}" for rank in RANKS]
    rows = []
    for name, counts in request_counts(courses, students).items():
        row = {"course_name": name, "capacity": courses.get(name).capacity}
        row.update(dict(zip(rank_cols, counts)))
        row["total_requests"] = sum(counts)
        rows.append(row)
    return pd.DataFrame(rows, columns=["course_name", "capacity", *rank_cols, "total_requests"])


def students_frame(students) -> pd.DataFrame:
    """One row per student with requests and outcome, in load order."""
    choice_cols = [f"choice_{rank}" for rank in RANKS]
    rows = []
    for student in students:
        names = [c.name for c in student.requests]
        row = {"student_id": student.student_id, "average": student.average}
        for idx, col in enumerate(choice_cols):
            row[col] = names[idx] if idx < len(names) else None
        row["assigned_course"] = student.assigned.name if student.is_assigned() else None
        row["assigned_rank"] = student.assigned_rank()
        rows.append(row)
    df = pd.DataFrame(
        rows,
        columns=["student_id", "average", *choice_cols, "assigned_course", "assigned_rank"],
    )
    df["assigned_rank"] = df["assigned_rank"].astype("Int64")
    return df
