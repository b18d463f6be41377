from __future__ import annotations

from consultbook.application.ports.service_catalog import ServiceCatalogPort
from consultbook.domain.entities.service_catalog import ServiceCatalogEntry
from consultbook.infrastructure.knowledge.service_catalog_data import SERVICE_CATALOG


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceCatalogEntry] | None = None) -> None:
        self._catalog = dict(catalog or SERVICE_CATALOG)

    def get_service(self, service_key: str) -> ServiceCatalogEntry | None:
        normalized_key = service_key.lower().strip()
        return self._catalog.get(normalized_key)

    def list_services(self) -> list[ServiceCatalogEntry]:
        return list(self._catalog.values())
