def _priority_key(student):
    # Higher average first; equal averages fall back to id ascending.
    return (-student.average, student.student_id)


def priority_order(students) -> list:
    """
    Students that submitted a request, in allocation order.

    Sorted by grade average descending; ties broken by student id
    ascending so the outcome never depends on load order.
    """
    candidates = [s for s in students if s.has_requests()]
    candidates.sort(key=_priority_key)
    return candidates


def allocate_seats(courses, students, notifier=None) -> int:
    """
    Deterministically assign each student to at most one requested course.

    Single greedy pass: students are taken in priority_order(); each gets the
    first course, in rank order, that still has a free seat. Seats are never
    released, so a student whose requested courses are all full when their
    turn comes stays unassigned.

    Returns the number of students left without a seat, counting students
    that never submitted a request.
    """
    for student in priority_order(students):
        if student.is_assigned():
            continue
        for course in student.requests:
            if not courses.has_room(course):
                continue
            courses.enroll(course, student)
            student.assigned = course
            if notifier is not None:
                notifier.assignment_made(student.student_id, course.name)
            break

    return sum(1 for s in students if not s.is_assigned())
