"""
Observer registry for the two announcements made by the core:

  request_received(student_id)                 once per accepted request
  assignment_made(student_id, course_name)     once per seat assigned

Listeners are plain objects; a listener may implement either method or both.
Dispatch is synchronous and follows registration order. A listener that
raises is reported on stderr and the remaining listeners still run.
"""

import sys


class Notifier:
    def __init__(self):
        self._listeners: list = []

    def add_listener(self, listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener) -> None:
        self._listeners.remove(listener)

    @property
    def listeners(self) -> list:
        return list(self._listeners)

    def _dispatch(self, event: str, *args) -> None:
        for listener in self._listeners:
            handler = getattr(listener, event, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception as exc:
                print(
                    f"[WARN] Listener {type(listener).__name__}.{event}{args} failed: {exc}",
                    file=sys.stderr,
                )

    def request_received(self, student_id: str) -> None:
        self._dispatch("request_received", student_id)

    def assignment_made(self, student_id: str, course_name: str) -> None:
        self._dispatch("assignment_made", student_id, course_name)


class RecordingListener:
    """Keeps every event in memory, in arrival order."""

    def __init__(self):
        self.events: list[dict] = []

    def request_received(self, student_id: str) -> None:
        self.events.append({"event": "request_received", "student_id": student_id})

    def assignment_made(self, student_id: str, course_name: str) -> None:
        self.events.append({
            "event": "assignment_made",
            "student_id": student_id,
            "course_name": course_name,
        })

    def of_kind(self, event: str) -> list[dict]:
        return [e for e in self.events if e["event"] == event]

    def clear(self) -> None:
        self.events.clear()
