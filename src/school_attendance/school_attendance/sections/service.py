from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..database.unit_of_work import UnitOfWork
from .model import Section


class SectionService:
    """Read-only lookup of sections for schedule and enrollment forms."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]):
        self._uow_factory = uow_factory

    def list(self, *, grade_level: Optional[str] = None, is_active: Optional[bool] = True) -> Sequence[Section]:
        with self._uow_factory() as uow:
            return uow.sections.list(grade_level=(grade_level or "").strip() or None, is_active=is_active)
