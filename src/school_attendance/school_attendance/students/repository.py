from __future__ import annotations

from typing import Optional, Protocol

from ..enrollments.model import EnrollmentApplication
from .model import Student


class StudentRepository(Protocol):
    def get(self, *, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create_from_application(self, application: EnrollmentApplication, *, section_id: int) -> int:
        """Insert an active student built from the application's personal fields.

        Returns student_id.
        """

        raise NotImplementedError

    def count_in_section(self, *, section_id: int) -> int:
        raise NotImplementedError
