from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.mysql_base import fetchall, fetchone
from .model import Section
from .repository import SectionRepository


def _row_to_section(r: dict) -> Section:
    return Section(
        section_id=int(r["section_id"]),
        section_name=r["section_name"],
        grade_level=r["grade_level"],
        description=r.get("description"),
        capacity=int(r["capacity"]) if r.get("capacity") is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLSectionRepository(SectionRepository):
    def __init__(self, cur):
        self._cur = cur

    def get(self, *, section_id: int, for_update: bool = False) -> Optional[Section]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(
            f"""
            SELECT section_id, section_name, grade_level, description, capacity, is_active
            FROM sections
            WHERE section_id=%s{lock}
            """,
            (int(section_id),),
        )
        r = fetchone(self._cur)
        return _row_to_section(r) if r else None

    def list(self, *, grade_level: Optional[str] = None, is_active: Optional[bool] = True) -> Sequence[Section]:
        clauses = ["1=1"]
        params: list[Any] = []
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)

        where = " AND ".join(clauses)
        self._cur.execute(
            f"""
            SELECT section_id, section_name, grade_level, description, capacity, is_active
            FROM sections
            WHERE {where}
            ORDER BY grade_level ASC, section_name ASC
            """,
            tuple(params),
        )
        sections = [_row_to_section(r) for r in fetchall(self._cur)]
        # Grade labels are compared normalised (case and spacing), same as Section.accepts_grade.
        if grade_level:
            sections = [s for s in sections if s.accepts_grade(grade_level)]
        return sections
