from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActivityFilters:
    company_id: int | None = None
    condominium_id: int | None = None
    search: str | None = None
