"""Shared table writers for allocation report exports."""

from __future__ import annotations

import os

import pandas as pd


def write_workbook(
    path: str,
    order: list[str],
    sheets: dict[str, pd.DataFrame],
) -> None:
    """Write sheets in a deterministic order to an xlsx file."""
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name in order:
            sheets.get(sheet_name, pd.DataFrame()).to_excel(
                writer,
                sheet_name=sheet_name,
                index=False,
            )


def write_csv_dir(
    out_dir: str,
    order: list[str],
    sheets: dict[str, pd.DataFrame],
) -> list[str]:
    """Write one `<sheet>.csv` per frame into out_dir. Returns written paths."""
    os.makedirs(out_dir, exist_ok=True)
    written = []
    for sheet_name in order:
        dest = os.path.join(out_dir, f"{sheet_name}.csv")
        sheets.get(sheet_name, pd.DataFrame()).to_csv(dest, index=False)
        written.append(dest)
    return written


def resolve_default_path(*relative_parts: str) -> str:
    """Build an absolute path relative to scripts/."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), *relative_parts))
