from machina.infrastructure.adapters.secondary.box.catalog_box_acquisition import (
    CatalogBoxAcquisition,
)

__all__ = ["CatalogBoxAcquisition"]
