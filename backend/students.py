"""
Student registry: identity, grade average, ranked requests and the
final assignment of every student.
"""

from errors import DuplicateEntryError, InvalidInputError, NotFoundError
from normalizer import clean_name, parse_average


class Student:
    def __init__(self, student_id: str, average: float):
        self.student_id = student_id
        self.average = average
        # Ranked Course references; rank = index + 1. Empty until submitted.
        self.requests: tuple = ()
        self.assigned = None

    def has_requests(self) -> bool:
        return len(self.requests) > 0

    def is_assigned(self) -> bool:
        return self.assigned is not None

    def assigned_rank(self) -> int | None:
        if self.assigned is None:
            return None
        for idx, course in enumerate(self.requests):
            if course is self.assigned:
                return idx + 1
        return None

    def __repr__(self) -> str:
        assigned = self.assigned.name if self.assigned is not None else None
        return f"Student({self.student_id!r}, average={self.average}, assigned={assigned!r})"


class StudentRegistry:
    """Owns every Student, keyed by id, in load order."""

    def __init__(self):
        self._students: dict[str, Student] = {}

    def load(self, student_id, average) -> Student:
        """Create a student with no requests and no assignment. Reloading is rejected."""
        clean = clean_name(student_id)
        if clean is None:
            raise InvalidInputError("Student id must be a non-empty string.")
        value = parse_average(average)
        if value is None:
            raise InvalidInputError(f"Grade average for '{clean}' must be a finite number, got {average!r}.")
        if clean in self._students:
            raise DuplicateEntryError(f"Student '{clean}' is already loaded.")
        student = Student(clean, value)
        self._students[clean] = student
        return student

    def get(self, student_id) -> Student:
        clean = clean_name(student_id)
        if clean is None or clean not in self._students:
            raise NotFoundError(f"Unknown student: {student_id!r}.")
        return self._students[clean]

    def list_ids(self) -> list[str]:
        return list(self._students)

    def list_ids_in_range(self, lo: float, hi: float) -> list[str]:
        """Ids whose average lies in [lo, hi], both ends inclusive."""
        return [s.student_id for s in self._students.values() if lo <= s.average <= hi]

    def __contains__(self, student_id) -> bool:
        return clean_name(student_id) in self._students

    def __len__(self) -> int:
        return len(self._students)

    def __iter__(self):
        return iter(self._students.values())
