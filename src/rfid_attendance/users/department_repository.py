from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .department_model import Department, Program


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_name(self, department_name: str) -> Optional[Department]:
        raise NotImplementedError


class ProgramRepository(Protocol):
    def list_all(self) -> Sequence[Program]:
        raise NotImplementedError

    def get_by_degree_and_branch(self, degree: str, branch_code: str) -> Optional[Program]:
        raise NotImplementedError
