import os
import sys

import pandas as pd

from errors import ElectiveError
from manager import ElectiveManager
from normalizer import clean_name
from rules import RANKS

_SHEETS = ("courses", "students", "requests")

# Accepted alternative headers -> canonical column name.
_COLUMN_ALIASES = {
    "courses": {
        "course": "course_name",
        "name": "course_name",
        "available_positions": "capacity",
        "seats": "capacity",
    },
    "students": {
        "id": "student_id",
        "student": "student_id",
        "grade_average": "average",
        "gpa": "average",
    },
    "requests": {
        "id": "student_id",
        "student": "student_id",
    },
}

_REQUIRED_COLUMNS = {
    "courses": ["course_name", "capacity"],
    "students": ["student_id", "average"],
    "requests": ["student_id"],
}

_CHOICE_COLUMNS = [f"choice_{rank}" for rank in RANKS]


def _safe_int(val, default=None):
    try:
        if pd.isna(val):
            return default
        as_float = float(val)
    except (TypeError, ValueError):
        return default
    if not as_float.is_integer():
        return default
    return int(as_float)


def _normalize_columns(df: pd.DataFrame, sheet: str) -> pd.DataFrame:
    """Lower-case headers, apply aliases and check required columns."""
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    rename_map = {
        alias: canonical
        for alias, canonical in _COLUMN_ALIASES.get(sheet, {}).items()
        if alias in df.columns and canonical not in df.columns
    }
    if rename_map:
        df = df.rename(columns=rename_map)
    missing = [c for c in _REQUIRED_COLUMNS[sheet] if c not in df.columns]
    if missing:
        raise ValueError(f"Sheet '{sheet}' is missing required column(s): {missing}")
    if sheet == "requests":
        for col in _CHOICE_COLUMNS:
            if col not in df.columns:
                df[col] = None
    return df


def _read_tables(data_path: str) -> dict[str, pd.DataFrame]:
    # Cells are read as text so numeric names and ids keep their spelling;
    # capacity and average are parsed per row by _safe_int and parse_average.
    if os.path.isdir(data_path):
        tables = {}
        for sheet in _SHEETS:
            csv_path = os.path.join(data_path, f"{sheet}.csv")
            if os.path.isfile(csv_path):
                tables[sheet] = pd.read_csv(csv_path, dtype=str)
            elif sheet != "requests":
                raise FileNotFoundError(f"Required file not found: {csv_path}")
        return tables

    if not os.path.isfile(data_path):
        raise FileNotFoundError(f"Data path not found: {data_path}")

    xl = pd.ExcelFile(data_path)
    sheet_names = [s.strip().lower() for s in xl.sheet_names]
    tables = {}
    for sheet in _SHEETS:
        if sheet in sheet_names:
            original = xl.sheet_names[sheet_names.index(sheet)]
            tables[sheet] = xl.parse(original, dtype=str)
        elif sheet != "requests":
            raise ValueError(f"Workbook {data_path} has no '{sheet}' sheet.")
    return tables


def load_data(data_path: str) -> dict:
    """
    Load course, student and request tables from a CSV directory or an
    .xlsx workbook. Raises on missing files or missing required columns.
    """
    tables = _read_tables(data_path)
    courses_df = _normalize_columns(tables["courses"], "courses")
    students_df = _normalize_columns(tables["students"], "students")
    if "requests" in tables:
        requests_df = _normalize_columns(tables["requests"], "requests")
    else:
        requests_df = pd.DataFrame(columns=["student_id", *_CHOICE_COLUMNS])
        print(f"[INFO] No requests table in {data_path}; students start without requests.")

    return {
        "courses_df": courses_df,
        "students_df": students_df,
        "requests_df": requests_df,
        "source": data_path,
    }


def _rejected_row(sheet: str, row_idx, error_code: str, message: str) -> dict:
    # Row numbers match a spreadsheet view: header is row 1.
    return {
        "sheet": sheet,
        "row": int(row_idx) + 2,
        "error_code": error_code,
        "message": message,
    }


def build_manager(data: dict, listeners=()) -> tuple[ElectiveManager, list[dict]]:
    """
    Build an ElectiveManager from loaded tables.

    Courses are defined, students loaded and requests submitted in row order.
    Listeners are registered before any request so they see every
    request_received event. Rows the core rejects are skipped and returned.
    """
    manager = ElectiveManager()
    for listener in listeners:
        manager.add_listener(listener)
    rejected: list[dict] = []

    for idx, row in data["courses_df"].iterrows():
        capacity = _safe_int(row.get("capacity"))
        if capacity is None:
            rejected.append(_rejected_row(
                "courses", idx, "INVALID_INPUT",
                f"Capacity {row.get('capacity')!r} is not a whole number.",
            ))
            continue
        try:
            manager.add_course(row.get("course_name"), capacity)
        except ElectiveError as exc:
            rejected.append(_rejected_row("courses", idx, exc.error_code, exc.message))

    for idx, row in data["students_df"].iterrows():
        try:
            manager.load_student(row.get("student_id"), row.get("average"))
        except ElectiveError as exc:
            rejected.append(_rejected_row("students", idx, exc.error_code, exc.message))

    for idx, row in data["requests_df"].iterrows():
        choices = [clean_name(row.get(col)) for col in _CHOICE_COLUMNS]
        choices = [c for c in choices if c is not None]
        try:
            manager.submit(row.get("student_id"), choices)
        except ElectiveError as exc:
            rejected.append(_rejected_row("requests", idx, exc.error_code, exc.message))

    for item in rejected:
        print(
            f"[WARN] Skipped {item['sheet']} row {item['row']} "
            f"({item['error_code']}): {item['message']}",
            file=sys.stderr,
        )
    print(
        f"[INFO] Loaded {len(manager.courses)} course(s), {len(manager.students)} student(s) "
        f"from {data.get('source', '<memory>')}"
    )
    return manager, rejected
