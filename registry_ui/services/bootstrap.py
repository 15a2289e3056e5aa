"""
Startup sequence of the registry browser.

Phases run strictly one after another:

    Idle -> Loading -> SessionRestoring -> SessionReady | SessionAnonymous
         -> CatalogLoading -> CatalogReady | CatalogFailed -> Ready

Session problems degrade to the anonymous state and a catalog failure
raises an alert, but neither stops the application from becoming ready.
Storage errors are not handled and propagate out of ``run()``.
"""
from __future__ import annotations

import enum
import logging
from typing import Awaitable, Callable, List, Optional

from registry_ui.domain.models import (
    AlertContent,
    BootstrapDegraded,
    BootstrapOutcome,
    BootstrapReady,
    CatalogLoadFailure,
)
from registry_ui.services.authentication import SessionManager
from registry_ui.services.catalog import PackageCatalog

logger = logging.getLogger(__name__)

ALERT_TITLE = "Warning"

LogoLoader = Callable[[], Awaitable[str]]


class BootstrapState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SESSION_RESTORING = "session_restoring"
    SESSION_READY = "session_ready"
    SESSION_ANONYMOUS = "session_anonymous"
    CATALOG_LOADING = "catalog_loading"
    CATALOG_READY = "catalog_ready"
    CATALOG_FAILED = "catalog_failed"
    READY = "ready"


class BootstrapOrchestrator:
    def __init__(
        self,
        session_manager: SessionManager,
        catalog: PackageCatalog,
        logo_loader: Optional[LogoLoader] = None,
    ):
        self.session_manager = session_manager
        self.catalog = catalog
        self.logo_loader = logo_loader

        self.state = BootstrapState.IDLE
        self.history: List[BootstrapState] = [BootstrapState.IDLE]
        self.is_loading = False
        self.logo_url = ""
        self.alert: Optional[AlertContent] = None
        self.show_alert = False
        self.outcome: Optional[BootstrapOutcome] = None

    def _transition(self, state: BootstrapState) -> None:
        logger.debug(f"Bootstrap: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def raise_alert(self, content: AlertContent) -> None:
        self.alert = content
        self.show_alert = True

    def dismiss_alert(self) -> None:
        self.show_alert = False

    async def _load_logo(self) -> None:
        if self.logo_loader is None:
            return
        try:
            self.logo_url = await self.logo_loader() or ""
        except Exception as e:
            logger.warning(f"Error getting logo: {e}")
            self.logo_url = ""

    async def run(self) -> BootstrapOutcome:
        """
        Bring the application from uninitialized to ready. May only be
        called once per orchestrator.
        """
        if self.state is not BootstrapState.IDLE:
            raise RuntimeError(f"Bootstrap already started (state: {self.state.value})")

        self._transition(BootstrapState.LOADING)
        self.is_loading = True
        await self._load_logo()

        self._transition(BootstrapState.SESSION_RESTORING)
        session = await self.session_manager.restore()
        self._transition(
            BootstrapState.SESSION_READY if session is not None else BootstrapState.SESSION_ANONYMOUS
        )

        self._transition(BootstrapState.CATALOG_LOADING)
        result = await self.catalog.load()
        if isinstance(result, CatalogLoadFailure):
            self._transition(BootstrapState.CATALOG_FAILED)
            alert = AlertContent(title=ALERT_TITLE, message=result.message)
            self.raise_alert(alert)
            outcome: BootstrapOutcome = BootstrapDegraded(session=session, catalog=[], alert=alert)
        else:
            self._transition(BootstrapState.CATALOG_READY)
            outcome = BootstrapReady(session=session, catalog=result)

        self._transition(BootstrapState.READY)
        self.is_loading = False
        self.outcome = outcome
        logger.info(
            f"Bootstrap complete: {outcome.kind}, "
            f"{len(outcome.catalog)} packages, "
            f"{'logged in as ' + session.username if session else 'anonymous'}"
        )
        return outcome
