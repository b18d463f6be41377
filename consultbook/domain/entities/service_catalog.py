from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceCatalogEntry:
    service_key: str
    display_name: str
    duration_minutes: int
    price: int
    description: str | None = None
