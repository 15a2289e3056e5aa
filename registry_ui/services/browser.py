from __future__ import annotations

from typing import List

from registry_ui.domain.models import MatchResult, PackageRecord
from registry_ui.domain.search import filter_packages
from registry_ui.services.catalog import PackageCatalog


class CatalogBrowser:
    """
    Search state behind the package list and the autocomplete box.

    ``packages`` is what the main list shows: the whole catalog while the
    search text is empty, the filtered records otherwise.
    """

    def __init__(self, catalog: PackageCatalog):
        self.catalog = catalog
        self.search_text = ""
        self.suggestions: List[MatchResult] = []
        self._filtered: List[PackageRecord] = []

    @property
    def packages(self) -> List[PackageRecord]:
        if not self.search_text:
            return self.catalog.current()
        return list(self._filtered)

    def _filter(self, value: str) -> List[PackageRecord]:
        return [match.record for match in filter_packages(self.catalog.current(), value)]

    def search(self, value: str) -> List[PackageRecord]:
        self.search_text = value or ""
        self._filtered = self._filter(self.search_text) if self.search_text else []
        return self.packages

    def fetch_suggestions(self, value: str) -> List[MatchResult]:
        self.suggestions = filter_packages(self.catalog.current(), value)
        return self.suggestions

    def clear_suggestions(self) -> None:
        self.suggestions = []

    def select_suggestion(self, value: str) -> List[PackageRecord]:
        """Apply a suggestion picked from the autocomplete list."""
        self.search_text = value
        self._filtered = self._filter(value)
        return list(self._filtered)
