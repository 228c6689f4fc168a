"""
ElectiveManager: one allocation session.

Owns the course registry, the student registry and the notifier. Requests are
accepted one at a time until allocate() runs; allocate() runs once, after which
the session is read-only and only the reporting queries are meaningful.
"""

import reports
from allocator import allocate_seats
from courses import CourseRegistry
from errors import AllocationStateError
from normalizer import parse_choice_list
from notifications import Notifier
from students import StudentRegistry
from validators import validate_request


class ElectiveManager:
    def __init__(self, notifier: Notifier | None = None):
        self.courses = CourseRegistry()
        self.students = StudentRegistry()
        self.notifier = notifier if notifier is not None else Notifier()
        self._allocated = False

    # ── Setup ────────────────────────────────────────────────────────────────

    def add_course(self, name, capacity: int):
        return self.courses.define(name, capacity)

    def list_courses(self) -> list[str]:
        return self.courses.list_names()

    def load_student(self, student_id, average: float):
        return self.students.load(student_id, average)

    def list_students(self, lo: float | None = None, hi: float | None = None) -> list[str]:
        """All student ids, or only those with lo <= average <= hi when bounds are given."""
        if lo is None and hi is None:
            return self.students.list_ids()
        lower = float("-inf") if lo is None else lo
        upper = float("inf") if hi is None else hi
        return self.students.list_ids_in_range(lower, upper)

    def add_listener(self, listener) -> None:
        self.notifier.add_listener(listener)

    # ── Requests ─────────────────────────────────────────────────────────────

    def submit(self, student_id, course_names) -> int:
        """
        Record a ranked request (first choice first) for one student.

        All checks run before anything is stored. Returns the number of
        courses requested.
        """
        names = parse_choice_list(course_names)
        student, resolved = validate_request(
            student_id,
            names,
            self.courses,
            self.students,
            allocation_done=self._allocated,
        )
        student.requests = resolved
        self.notifier.request_received(student.student_id)
        return len(resolved)

    # ── Allocation ───────────────────────────────────────────────────────────

    @property
    def allocated(self) -> bool:
        return self._allocated

    def allocate(self) -> int:
        """Run the one-shot allocation pass. Returns the unassigned count."""
        if self._allocated:
            raise AllocationStateError("Allocation has already run for this session.")
        self._allocated = True
        return allocate_seats(self.courses, self.students, self.notifier)

    # ── Reports ──────────────────────────────────────────────────────────────

    def request_counts(self) -> dict[str, list[int]]:
        return reports.request_counts(self.courses, self.students)

    def assignments(self) -> dict[str, list[str]]:
        return reports.assignments(self.courses)

    def success_rate(self, rank: int) -> float:
        return reports.success_rate(self.students, rank)

    def unassigned(self) -> list[str]:
        return reports.unassigned(self.students)

    def summary(self) -> dict:
        out = reports.allocation_summary(self.courses, self.students)
        out["allocated"] = self._allocated
        return out

    def assignment_of(self, student_id) -> str | None:
        """Course name assigned to student_id, or None. Unknown ids raise NotFoundError."""
        student = self.students.get(student_id)
        return student.assigned.name if student.is_assigned() else None
