"""
In-memory package catalog loaded once per bootstrap from the registry.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, Union

from registry_ui.domain.models import CatalogLoadFailure, PackageRecord
from registry_ui.services.registry_client import RegistryAPIError

logger = logging.getLogger(__name__)


class CatalogClient(Protocol):
    async def get_packages(self) -> Any:
        """Return the raw package list or raise ``RegistryAPIError``."""
        ...


def to_package_record(raw: Any) -> Optional[PackageRecord]:
    """
    Convert a raw registry record, renaming ``name`` to ``label`` and keeping
    every other field verbatim. Returns None for records without a usable name.
    """
    if not isinstance(raw, dict):
        return None
    data = dict(raw)
    name = data.pop("name", None)
    if not isinstance(name, str) or not name:
        return None
    data["label"] = name
    return PackageRecord(**data)


class PackageCatalog:
    """Owns the catalog snapshot; it is replaced wholesale, never edited in place."""

    def __init__(self, client: CatalogClient):
        self.client = client
        self._packages: List[PackageRecord] = []

    def current(self) -> List[PackageRecord]:
        """Return the last successfully loaded catalog (empty if none)."""
        return list(self._packages)

    def _fail(self, reason: str) -> CatalogLoadFailure:
        self._packages = []
        message = f"Unable to load package list: {reason}"
        logger.warning(message)
        return CatalogLoadFailure(message=message)

    async def load(self) -> Union[List[PackageRecord], CatalogLoadFailure]:
        """
        Fetch the package list once. On a transport or parse failure the
        catalog is left empty and a failure with a readable message is
        returned instead of raising. Storage errors raised while building
        the request propagate.
        """
        try:
            raw_packages = await self.client.get_packages()
        except RegistryAPIError as e:
            return self._fail(e.message)

        if not isinstance(raw_packages, list):
            return self._fail(f"expected a list of packages, got {type(raw_packages).__name__}")

        packages: List[PackageRecord] = []
        for raw in raw_packages:
            record = to_package_record(raw)
            if record is None:
                logger.warning(f"Skipping package record without a name: {raw!r:.80}")
                continue
            packages.append(record)

        self._packages = packages
        logger.info(f"Loaded {len(packages)} packages")
        return self.current()
