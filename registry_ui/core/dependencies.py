from typing import Optional

from registry_ui.core.config import BrowserSettings, load_settings
from registry_ui.services.authentication import RegistryLoginService, SessionManager
from registry_ui.services.bootstrap import BootstrapOrchestrator
from registry_ui.services.browser import CatalogBrowser
from registry_ui.services.catalog import PackageCatalog
from registry_ui.services.registry_client import RegistryClient
from registry_ui.storage.json_session_store import JsonSessionStorage
from registry_ui.storage.session_store import SessionStorage

_settings: Optional[BrowserSettings] = None
_storage: Optional[SessionStorage] = None
_client: Optional[RegistryClient] = None
_session_manager: Optional[SessionManager] = None
_catalog: Optional[PackageCatalog] = None
_browser: Optional[CatalogBrowser] = None
_orchestrator: Optional[BootstrapOrchestrator] = None

def get_settings() -> BrowserSettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings

def get_storage() -> SessionStorage:
    global _storage
    if _storage is None:
        _storage = JsonSessionStorage(get_settings().session_file)
    return _storage

def get_registry_client() -> RegistryClient:
    global _client
    if _client is None:
        settings = get_settings()
        _client = RegistryClient(settings.api_url, storage=get_storage(), timeout=settings.request_timeout)
    return _client

def get_session_manager() -> SessionManager:
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager(
            get_storage(),
            RegistryLoginService(get_registry_client()),
            token_leeway=get_settings().token_leeway_seconds,
        )
    return _session_manager

def get_catalog() -> PackageCatalog:
    global _catalog
    if _catalog is None:
        _catalog = PackageCatalog(get_registry_client())
    return _catalog

def get_browser() -> CatalogBrowser:
    global _browser
    if _browser is None:
        _browser = CatalogBrowser(get_catalog())
    return _browser

def get_orchestrator() -> BootstrapOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = BootstrapOrchestrator(
            get_session_manager(),
            get_catalog(),
            logo_loader=get_registry_client().get_logo,
        )
    return _orchestrator
