"""
Tests for enrollment request validation.

Covers find_request_problem()/validate_request() on small registries and
the all-or-nothing behaviour of ElectiveManager.submit().
"""

import pytest

from courses import CourseRegistry
from errors import InvalidRequestError
from manager import ElectiveManager
from notifications import RecordingListener
from students import StudentRegistry
from validators import find_request_problem, validate_request


@pytest.fixture
def registries():
    courses = CourseRegistry()
    for name in ["c1", "c2", "c3", "c4"]:
        courses.define(name, 1)
    students = StudentRegistry()
    students.load("s1", 27.0)
    students.load("s2", 24.0)
    return courses, students


@pytest.fixture
def manager():
    m = ElectiveManager()
    for name in ["c1", "c2", "c3", "c4"]:
        m.add_course(name, 1)
    m.load_student("s1", 27.0)
    m.load_student("s2", 24.0)
    return m


# ── find_request_problem ──────────────────────────────────────────────────────

class TestFindRequestProblem:
    def test_valid(self, registries):
        courses, students = registries
        assert find_request_problem("s1", ["c1", "c2", "c3"], courses, students) == (None, None)

    def test_empty_list(self, registries):
        courses, students = registries
        code, _ = find_request_problem("s1", [], courses, students)
        assert code == "INVALID_CHOICE_COUNT"

    def test_too_many(self, registries):
        courses, students = registries
        code, msg = find_request_problem("s1", ["c1", "c2", "c3", "c4"], courses, students)
        assert code == "INVALID_CHOICE_COUNT"
        assert "got 4" in msg

    def test_unknown_student(self, registries):
        courses, students = registries
        code, _ = find_request_problem("ghost", ["c1"], courses, students)
        assert code == "UNKNOWN_STUDENT"

    def test_unknown_course(self, registries):
        courses, students = registries
        code, msg = find_request_problem("s1", ["c1", "nope"], courses, students)
        assert code == "UNKNOWN_COURSE"
        assert "nope" in msg

    def test_duplicate_choice(self, registries):
        courses, students = registries
        code, _ = find_request_problem("s1", ["c1", "c2", "c1"], courses, students)
        assert code == "DUPLICATE_CHOICE"

    def test_allocation_closed(self, registries):
        courses, students = registries
        code, _ = find_request_problem("s1", ["c1"], courses, students, allocation_done=True)
        assert code == "ALLOCATION_CLOSED"


class TestCheckOrder:
    def test_count_checked_before_student(self, registries):
        courses, students = registries
        code, _ = find_request_problem("ghost", [], courses, students)
        assert code == "INVALID_CHOICE_COUNT"

    def test_student_checked_before_course(self, registries):
        courses, students = registries
        code, _ = find_request_problem("ghost", ["nope"], courses, students)
        assert code == "UNKNOWN_STUDENT"

    def test_course_checked_before_duplicates(self, registries):
        courses, students = registries
        code, _ = find_request_problem("s1", ["nope", "nope"], courses, students)
        assert code == "UNKNOWN_COURSE"


class TestValidateRequest:
    def test_resolves_courses_in_rank_order(self, registries):
        courses, students = registries
        student, resolved = validate_request("s1", ["c3", "c1"], courses, students)
        assert student.student_id == "s1"
        assert [c.name for c in resolved] == ["c3", "c1"]
        assert resolved[0] is courses.get("c3")
        # validation alone stores nothing
        assert student.requests == ()

    def test_raises_with_code(self, registries):
        courses, students = registries
        with pytest.raises(InvalidRequestError) as exc_info:
            validate_request("s1", [], courses, students)
        assert exc_info.value.error_code == "INVALID_CHOICE_COUNT"
        assert exc_info.value.http_status == 400


# ── ElectiveManager.submit ────────────────────────────────────────────────────

class TestSubmit:
    def test_returns_count_and_stores(self, manager):
        assert manager.submit("s1", ["c2", "c1"]) == 2
        assert [c.name for c in manager.students.get("s1").requests] == ["c2", "c1"]

    def test_accepts_comma_string(self, manager):
        assert manager.submit("s1", "c1, c2, c3") == 3

    @pytest.mark.parametrize("choices", [[], ["c1", "c2", "c3", "c4"]])
    def test_bad_count_leaves_requests_unset(self, manager, choices):
        with pytest.raises(InvalidRequestError):
            manager.submit("s1", choices)
        assert manager.students.get("s1").requests == ()

    def test_unknown_student(self, manager):
        with pytest.raises(InvalidRequestError) as exc_info:
            manager.submit("ghost", ["c1"])
        assert exc_info.value.error_code == "UNKNOWN_STUDENT"

    def test_unknown_course_no_partial_store(self, manager):
        with pytest.raises(InvalidRequestError):
            manager.submit("s1", ["c1", "unknown"])
        assert manager.students.get("s1").requests == ()

    def test_resubmission_rejected_first_kept(self, manager):
        manager.submit("s1", ["c1"])
        with pytest.raises(InvalidRequestError) as exc_info:
            manager.submit("s1", ["c2"])
        assert exc_info.value.error_code == "ALREADY_SUBMITTED"
        assert [c.name for c in manager.students.get("s1").requests] == ["c1"]

    def test_notification_only_on_success(self, manager):
        rec = RecordingListener()
        manager.add_listener(rec)
        with pytest.raises(InvalidRequestError):
            manager.submit("s1", [])
        manager.submit("s2", ["c1"])
        assert rec.events == [{"event": "request_received", "student_id": "s2"}]

    def test_error_payload_shape(self, manager):
        with pytest.raises(InvalidRequestError) as exc_info:
            manager.submit("s1", [])
        payload = exc_info.value.to_error_payload()
        assert payload["mode"] == "error"
        assert payload["error"]["error_code"] == "INVALID_CHOICE_COUNT"
        assert payload["error"]["message"]
