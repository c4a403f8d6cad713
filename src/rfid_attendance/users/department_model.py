from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    department_id: int
    department_name: str


@dataclass(frozen=True)
class Program:
    program_id: int
    degree: str
    branch_code: str
    branch_name: str
