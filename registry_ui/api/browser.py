"""
JSON routes exposing the catalog, search and alert state to the presentation layer.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from registry_ui.core.dependencies import get_browser, get_orchestrator, get_session_manager
from registry_ui.domain.models import AlertContent, LoginError, MatchResult, PackageRecord
from registry_ui.services.authentication import SessionManager
from registry_ui.services.bootstrap import BootstrapOrchestrator
from registry_ui.services.browser import CatalogBrowser


router = APIRouter()


class AppState(BaseModel):
    state: str
    is_loading: bool
    logo_url: str
    username: Optional[str] = None
    is_logged_in: bool
    show_login_form: bool
    login_error: Optional[LoginError] = None
    search: str
    show_alert: bool
    alert: Optional[AlertContent] = None


@router.get("/state", response_model=AppState)
async def get_state(
    orchestrator: BootstrapOrchestrator = Depends(get_orchestrator),
    sessions: SessionManager = Depends(get_session_manager),
    browser: CatalogBrowser = Depends(get_browser),
) -> AppState:
    """
    Everything a page needs to decide what to render: spinner, header
    user name, alert dialog.
    """
    return AppState(
        state=orchestrator.state.value,
        is_loading=orchestrator.is_loading,
        logo_url=orchestrator.logo_url,
        username=sessions.session.username if sessions.session else None,
        is_logged_in=sessions.is_logged_in,
        show_login_form=sessions.show_login_form,
        login_error=sessions.login_error,
        search=browser.search_text,
        show_alert=orchestrator.show_alert,
        alert=orchestrator.alert,
    )


@router.get("/packages", response_model=List[PackageRecord])
async def list_packages(
    search: str = Query(default=""),
    browser: CatalogBrowser = Depends(get_browser),
) -> List[PackageRecord]:
    """Package list for the main view, filtered when ``search`` is set."""
    return browser.search(search)


@router.get("/suggestions", response_model=List[MatchResult])
async def fetch_suggestions(
    q: str = Query(default=""),
    browser: CatalogBrowser = Depends(get_browser),
) -> List[MatchResult]:
    return browser.fetch_suggestions(q)


@router.delete("/suggestions")
async def clear_suggestions(browser: CatalogBrowser = Depends(get_browser)) -> dict:
    browser.clear_suggestions()
    return {"suggestions": []}


@router.post("/suggestions/select", response_model=List[PackageRecord])
async def select_suggestion(
    value: str = Query(...),
    browser: CatalogBrowser = Depends(get_browser),
) -> List[PackageRecord]:
    return browser.select_suggestion(value)


@router.post("/alert/dismiss")
async def dismiss_alert(orchestrator: BootstrapOrchestrator = Depends(get_orchestrator)) -> dict:
    orchestrator.dismiss_alert()
    return {"show_alert": False}
