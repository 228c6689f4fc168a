"""
Pure validation helpers for enrollment requests.
No Flask or data-loader imports; nothing here mutates a registry.
"""

from typing import List, Optional, Tuple

from errors import InvalidRequestError
from normalizer import clean_name
from rules import (
    ALLOCATION_CLOSED,
    ALREADY_SUBMITTED,
    DUPLICATE_CHOICE,
    INVALID_CHOICE_COUNT,
    MAX_CHOICES,
    MIN_CHOICES,
    UNKNOWN_COURSE,
    UNKNOWN_STUDENT,
)


def find_request_problem(
    student_id,
    course_names: List[str],
    courses,
    students,
    allocation_done: bool = False,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (error_code, message) for the first failing check,
    (None, None) when the request is acceptable.

    Check order:
      1. choice count within [MIN_CHOICES, MAX_CHOICES]
      2. student exists
      3. every course exists
      4. no course listed twice
      5. student has not submitted before
      6. allocation has not run yet
    """
    count = len(course_names)
    if count < MIN_CHOICES or count > MAX_CHOICES:
        return (
            INVALID_CHOICE_COUNT,
            f"A request must list between {MIN_CHOICES} and {MAX_CHOICES} courses, got {count}.",
        )

    if student_id not in students:
        return UNKNOWN_STUDENT, f"Unknown student: {student_id!r}."

    missing = [name for name in course_names if name not in courses]
    if missing:
        return UNKNOWN_COURSE, f"Unknown course(s): {', '.join(repr(m) for m in missing)}."

    cleaned = [clean_name(name) for name in course_names]
    if len(set(cleaned)) != len(cleaned):
        repeated = sorted({c for c in cleaned if cleaned.count(c) > 1})
        return DUPLICATE_CHOICE, f"Course(s) listed more than once: {', '.join(repeated)}."

    if students.get(student_id).has_requests():
        return ALREADY_SUBMITTED, f"Student '{clean_name(student_id)}' has already submitted a request."

    if allocation_done:
        return ALLOCATION_CLOSED, "Allocation has already run; no further requests are accepted."

    return None, None


def validate_request(
    student_id,
    course_names: List[str],
    courses,
    students,
    allocation_done: bool = False,
) -> tuple:
    """
    Validate a request and resolve it to (Student, (Course, ...)).

    Raises InvalidRequestError with the failing check's code.
    """
    names = list(course_names) if course_names is not None else []
    code, message = find_request_problem(student_id, names, courses, students, allocation_done)
    if code is not None:
        raise InvalidRequestError(message, error_code=code)
    student = students.get(student_id)
    resolved = tuple(courses.get(name) for name in names)
    return student, resolved
