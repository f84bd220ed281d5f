from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .assignments.service import AssignmentService
from .core.constants import DEFAULT_PAGE_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import MySQLUnitOfWork, UnitOfWork
from .enrollments.service import EnrollmentService
from .schedules.service import ScheduleService
from .sections.service import SectionService


@dataclass(frozen=True)
class Container:
    uow_factory: Callable[[], UnitOfWork]

    schedule_service: ScheduleService
    section_service: SectionService
    enrollment_service: EnrollmentService
    assignment_service: AssignmentService

    conn: Optional[DatabaseConnection] = None
    default_page_limit: int = DEFAULT_PAGE_LIMIT


def build_services(
    uow_factory: Callable[[], UnitOfWork],
    *,
    conn: Optional[DatabaseConnection] = None,
    default_page_limit: int = DEFAULT_PAGE_LIMIT,
) -> Container:
    return Container(
        uow_factory=uow_factory,
        schedule_service=ScheduleService(uow_factory),
        section_service=SectionService(uow_factory),
        enrollment_service=EnrollmentService(uow_factory),
        assignment_service=AssignmentService(uow_factory),
        conn=conn,
        default_page_limit=default_page_limit,
    )


def build_container(*, db_config: dict, default_page_limit: int = DEFAULT_PAGE_LIMIT) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    return build_services(lambda: MySQLUnitOfWork(conn), conn=conn, default_page_limit=default_page_limit)
