from __future__ import annotations

from contextlib import ExitStack
from typing import Optional, Protocol

from ..assignments.mysql_assignment_repository import MySQLAssignmentRepository
from ..assignments.repository import AssignmentRepository
from ..audit.mysql_audit_repository import MySQLAuditRepository
from ..audit.repository import AuditRepository
from ..enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from ..enrollments.repository import EnrollmentRepository
from ..schedules.mysql_schedule_repository import MySQLScheduleRepository
from ..schedules.repository import ScheduleRepository
from ..sections.mysql_section_repository import MySQLSectionRepository
from ..sections.repository import SectionRepository
from ..students.mysql_student_repository import MySQLStudentRepository
from ..students.repository import StudentRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor


class UnitOfWork(Protocol):
    """One transaction spanning every repository it exposes.

    Leaving the block normally commits; leaving it with an exception rolls back.
    """

    schedules: ScheduleRepository
    sections: SectionRepository
    students: StudentRepository
    enrollments: EnrollmentRepository
    assignments: AssignmentRepository
    audit: AuditRepository

    def __enter__(self) -> "UnitOfWork":
        raise NotImplementedError

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        raise NotImplementedError


class MySQLUnitOfWork(UnitOfWork):
    """Runs at READ COMMITTED: a read issued after `FOR UPDATE` returns sees rows
    committed by the writer that held the lock, not a snapshot from before it.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, isolation_level: str = "READ COMMITTED"):
        self._conn_factory = conn_factory
        self._isolation_level = isolation_level
        self._stack: Optional[ExitStack] = None

    def __enter__(self) -> "MySQLUnitOfWork":
        with ExitStack() as stack:
            conn, cur = stack.enter_context(db_cursor(self._conn_factory))
            # Must precede the first read; InnoDB fixes the snapshot on the first consistent read.
            conn.start_transaction(isolation_level=self._isolation_level)
            self._stack = stack.pop_all()

        self.schedules = MySQLScheduleRepository(cur)
        self.sections = MySQLSectionRepository(cur)
        self.students = MySQLStudentRepository(cur)
        self.enrollments = MySQLEnrollmentRepository(cur)
        self.assignments = MySQLAssignmentRepository(cur)
        self.audit = MySQLAuditRepository(cur)
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        stack, self._stack = self._stack, None
        if stack is None:
            return None
        return stack.__exit__(exc_type, exc, tb)
