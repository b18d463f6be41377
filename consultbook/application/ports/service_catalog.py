from __future__ import annotations

from abc import ABC, abstractmethod

from consultbook.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_key: str) -> ServiceCatalogEntry | None:
        """Get service catalog entry by service key."""
        raise NotImplementedError

    @abstractmethod
    def list_services(self) -> list[ServiceCatalogEntry]:
        """List all bookable services in display order."""
        raise NotImplementedError
