from __future__ import annotations

from consultbook.domain.entities.service_catalog import ServiceCatalogEntry

SERVICE_CATALOG: dict[str, ServiceCatalogEntry] = {
    "architecture": ServiceCatalogEntry(
        service_key="architecture",
        display_name="Architecture Consultation",
        duration_minutes=90,
        price=200,
        description="Residential and commercial building design, from concept to drawings.",
    ),
    "interior": ServiceCatalogEntry(
        service_key="interior",
        display_name="Interior Design Consultation",
        duration_minutes=60,
        price=200,
        description="Space planning, materials and finishes.",
    ),
    "plotting": ServiceCatalogEntry(
        service_key="plotting",
        display_name="Plot Planning Consultation",
        duration_minutes=60,
        price=200,
        description="Site layout, setbacks and plot utilisation.",
    ),
    "general": ServiceCatalogEntry(
        service_key="general",
        display_name="General Consultation",
        duration_minutes=45,
        price=200,
    ),
}
