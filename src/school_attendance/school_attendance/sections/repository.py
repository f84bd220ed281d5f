from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Section


class SectionRepository(Protocol):
    def get(self, *, section_id: int, for_update: bool = False) -> Optional[Section]:
        raise NotImplementedError

    def list(self, *, grade_level: Optional[str] = None, is_active: Optional[bool] = True) -> Sequence[Section]:
        raise NotImplementedError
