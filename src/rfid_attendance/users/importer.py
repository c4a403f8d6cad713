"""Read roster rows from uploaded Excel workbooks.

Only the first worksheet is read and its first row is treated as a header.
Columns are matched by position so header captions may be in any language.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import pandas as pd

from ..core.exceptions import ValidationError

STUDENT_COLUMNS = ("user_id", "user_name", "year", "degree", "branch_code")
FACULTY_COLUMNS = ("user_id", "user_name", "department_name", "designation")


@dataclass(frozen=True)
class StudentImportRow:
    user_id: str
    user_name: str
    year: str
    degree: str
    branch_code: str


@dataclass(frozen=True)
class FacultyImportRow:
    user_id: str
    user_name: str
    department_name: str
    designation: str


def _is_blank_sheet(df: pd.DataFrame) -> bool:
    # pandas labels missing header cells "Unnamed: N".
    headers = [str(c).strip() for c in df.columns]
    return df.empty and all(not h or h.startswith("Unnamed:") for h in headers)


def _read_sheet(source: Union[str, Path], columns: tuple[str, ...]) -> list[dict]:
    try:
        df = pd.read_excel(source, sheet_name=0, header=0, dtype=str, keep_default_na=False, engine="openpyxl")
    except pd.errors.EmptyDataError:
        return []
    except (ValueError, OSError) as e:
        raise ValidationError(f"Could not read Excel file: {e}") from e

    if _is_blank_sheet(df):
        return []

    if df.shape[1] < len(columns):
        raise ValidationError(f"Expected {len(columns)} columns: {', '.join(columns)}.")

    df = df.iloc[:, : len(columns)].fillna("")
    df.columns = list(columns)
    return [{k: str(v).strip() for k, v in rec.items()} for rec in df.to_dict(orient="records")]


def read_student_rows(source: Union[str, Path]) -> list[StudentImportRow]:
    return [StudentImportRow(**rec) for rec in _read_sheet(source, STUDENT_COLUMNS)]


def read_faculty_rows(source: Union[str, Path]) -> list[FacultyImportRow]:
    return [FacultyImportRow(**rec) for rec in _read_sheet(source, FACULTY_COLUMNS)]
