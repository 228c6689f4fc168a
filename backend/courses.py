"""
Course registry: elective offers, their capacity and their current roster.

Rosters are only grown by the allocation pass. `enroll` never checks
capacity; callers confirm `has_room` first.
"""

from errors import DuplicateEntryError, InvalidInputError, NotFoundError
from normalizer import clean_name


class Course:
    """One elective offer with a fixed number of seats."""

    def __init__(self, name: str, capacity: int):
        self.name = name
        self.capacity = capacity
        self.roster: list = []

    def has_room(self) -> bool:
        return len(self.roster) < self.capacity

    def seats_left(self) -> int:
        return max(0, self.capacity - len(self.roster))

    def __repr__(self) -> str:
        return f"Course({self.name!r}, capacity={self.capacity}, enrolled={len(self.roster)})"


class CourseRegistry:
    """Owns every Course, keyed by name."""

    def __init__(self):
        self._courses: dict[str, Course] = {}

    def define(self, name, capacity) -> Course:
        """Create a course with an empty roster. Redefinition is rejected."""
        clean = clean_name(name)
        if clean is None:
            raise InvalidInputError("Course name must be a non-empty string.")
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise InvalidInputError(f"Capacity for '{clean}' must be an integer, got {capacity!r}.")
        if capacity < 0:
            raise InvalidInputError(f"Capacity for '{clean}' cannot be negative ({capacity}).")
        if clean in self._courses:
            raise DuplicateEntryError(f"Course '{clean}' is already defined.")
        course = Course(clean, capacity)
        self._courses[clean] = course
        return course

    def get(self, name) -> Course:
        clean = clean_name(name)
        if clean is None or clean not in self._courses:
            raise NotFoundError(f"Unknown course: {name!r}.")
        return self._courses[clean]

    def _resolve(self, course) -> Course:
        if isinstance(course, Course):
            return course
        return self.get(course)

    def has_room(self, course) -> bool:
        return self._resolve(course).has_room()

    def enroll(self, course, student) -> None:
        self._resolve(course).roster.append(student)

    def list_names(self) -> list[str]:
        return sorted(self._courses)

    def __contains__(self, name) -> bool:
        return clean_name(name) in self._courses

    def __len__(self) -> int:
        return len(self._courses)

    def __iter__(self):
        return iter(self._courses.values())
