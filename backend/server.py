import os
import sys
import time
import threading

# Ensure backend/ is on sys.path so sibling imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask, g, jsonify, request
from dotenv import load_dotenv

from data_loader import build_manager, load_data
from errors import ElectiveError, InvalidInputError
from manager import ElectiveManager
from notifications import RecordingListener

load_dotenv()

app = Flask(__name__)

# ── Paths ─────────────────────────────────────────────────────────────────────
BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BACKEND_DIR)
_DEFAULT_DATA_PATH = os.path.join(PROJECT_ROOT, "data")
_env_data_path = os.environ.get("DATA_PATH")
if not _env_data_path:
    DATA_PATH = _DEFAULT_DATA_PATH
elif not os.path.isabs(_env_data_path):
    DATA_PATH = os.path.join(PROJECT_ROOT, _env_data_path)
else:
    DATA_PATH = _env_data_path

# One allocation session per process; every route that touches it holds the lock.
_manager_lock = threading.Lock()


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, float(raw))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, int(raw))
    except (TypeError, ValueError):
        return default


_SLOW_REQUEST_LOG_MS = _env_float("SLOW_REQUEST_LOG_MS", 750.0, minimum=0.0)


def _new_session(data_path: str | None):
    """Fresh manager + event recorder, seeded from data_path when it exists."""
    recorder = RecordingListener()
    if data_path is None or not os.path.exists(data_path):
        manager = ElectiveManager()
        manager.add_listener(recorder)
        return manager, recorder, []
    manager, rejected = build_manager(load_data(data_path), listeners=[recorder])
    return manager, recorder, rejected


# ── Startup data load ──────────────────────────────────────────────────────────
try:
    _manager, _events, _rejected_rows = _new_session(DATA_PATH)
    if os.path.exists(DATA_PATH):
        print(f"[OK] Loaded {len(_manager.courses)} courses from {DATA_PATH}")
    else:
        print(f"[WARN] DATA_PATH not found ({DATA_PATH}); starting with an empty session.", file=sys.stderr)
except Exception as exc:
    print(f"[FATAL] Failed to load data: {exc}", file=sys.stderr)
    sys.exit(1)


def _error_response(error_code: str, message: str, status: int):
    return jsonify({
        "mode": "error",
        "error": {"error_code": error_code, "message": message},
    }), status


def _json_body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object.")
    return body


def _query_float(name: str):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise InvalidInputError(f"Query parameter '{name}' must be a number, got {raw!r}.")


# -- Security headers ------------------------------------------------------
@app.before_request
def _start_request_timer():
    g._request_start_time = time.perf_counter()


@app.after_request
def _add_security_headers(response):
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "same-origin"

    started = getattr(g, "_request_start_time", None)
    if started is not None:
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms >= _SLOW_REQUEST_LOG_MS:
            endpoint = request.endpoint or "unknown"
            print(
                f"[SLOW] {request.method} {request.path} "
                f"endpoint={endpoint} status={response.status_code} duration_ms={duration_ms:.1f}"
            )
    return response


# ── Error handlers ─────────────────────────────────────────────────────────────
@app.errorhandler(ElectiveError)
def handle_elective_error(e):
    return jsonify(e.to_error_payload()), e.http_status


@app.errorhandler(404)
def handle_not_found(e):
    return _error_response("NOT_FOUND", "No such endpoint.", 404)


@app.errorhandler(405)
def handle_method_not_allowed(e):
    return _error_response("METHOD_NOT_ALLOWED", "Method not allowed for this endpoint.", 405)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    print(f"[WARN] Unhandled error on {request.method} {request.path}: {e!r}", file=sys.stderr)
    return _error_response("SERVER_ERROR", "An unexpected server error occurred.", 500)


# ── Routes ─────────────────────────────────────────────────────────────────────
@app.route("/health", methods=["GET"])
def health_endpoint():
    with _manager_lock:
        allocated = _manager.allocated
    return jsonify({
        "status": "ok",
        "version": "1.0.0",
        "allocated": allocated,
        "rejected_rows": len(_rejected_rows),
    })


@app.route("/courses", methods=["GET"])
def get_courses():
    out = []
    with _manager_lock:
        for name in _manager.list_courses():
            course = _manager.courses.get(name)
            out.append({
                "course_name": name,
                "capacity": course.capacity,
                "enrolled": len(course.roster),
            })
    return jsonify({"courses": out})


@app.route("/courses", methods=["POST"])
def add_course():
    body = _json_body()
    capacity = body.get("capacity")
    with _manager_lock:
        course = _manager.add_course(body.get("name"), capacity)
    return jsonify({"mode": "course_added", "course_name": course.name, "capacity": course.capacity}), 201


@app.route("/students", methods=["GET"])
def get_students():
    lo = _query_float("min")
    hi = _query_float("max")
    with _manager_lock:
        ids = _manager.list_students(lo, hi)
    return jsonify({"students": ids})


@app.route("/students", methods=["POST"])
def add_student():
    body = _json_body()
    with _manager_lock:
        student = _manager.load_student(body.get("student_id"), body.get("average"))
    return jsonify({"mode": "student_loaded", "student_id": student.student_id, "average": student.average}), 201


@app.route("/requests", methods=["POST"])
def submit_request():
    body = _json_body()
    courses = body.get("courses")
    if courses is not None and not isinstance(courses, (list, str)):
        raise InvalidInputError("'courses' must be a list of course names or a comma-separated string.")
    with _manager_lock:
        count = _manager.submit(body.get("student_id"), courses)
    return jsonify({"mode": "request_received", "count": count}), 201


@app.route("/allocate", methods=["POST"])
def allocate_endpoint():
    with _manager_lock:
        unassigned_count = _manager.allocate()
        summary = _manager.summary()
    return jsonify({
        "mode": "allocated",
        "unassigned_count": unassigned_count,
        "summary": summary,
    })


@app.route("/reports/request-counts", methods=["GET"])
def request_counts_report():
    with _manager_lock:
        counts = _manager.request_counts()
    return jsonify({"request_counts": counts})


@app.route("/reports/assignments", methods=["GET"])
def assignments_report():
    with _manager_lock:
        assigned = _manager.assignments()
    return jsonify({"assignments": assigned})


@app.route("/reports/success-rate/<int:rank>", methods=["GET"])
def success_rate_report(rank):
    with _manager_lock:
        rate = _manager.success_rate(rank)
    return jsonify({"rank": rank, "success_rate": rate})


@app.route("/reports/unassigned", methods=["GET"])
def unassigned_report():
    with _manager_lock:
        ids = _manager.unassigned()
    return jsonify({"unassigned": ids})


@app.route("/reports/summary", methods=["GET"])
def summary_report():
    with _manager_lock:
        summary = _manager.summary()
    return jsonify(summary)


@app.route("/events", methods=["GET"])
def events_endpoint():
    kind = request.args.get("kind")
    with _manager_lock:
        events = _events.of_kind(kind) if kind else list(_events.events)
    return jsonify({"events": events})


if __name__ == "__main__":
    port = _env_int("PORT", 5000)
    debug = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(host="0.0.0.0", port=port, debug=debug)
