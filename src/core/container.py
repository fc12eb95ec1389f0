"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from core.config import Settings, get_settings
from core.id import Generator, IdGenerator
from core.logging_config import configure_logging
from clients.pages import PagesClient
from document.store import BuilderStore
from document.types import PersistenceGateway
from handlers.autosave import AutosaveTask


class BuilderModule(Module):
    """Builder dependencies."""

    def __init__(self, backend_url: str | None = None) -> None:
        self.backend_url = backend_url

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings (environment, overridden by explicit arguments)."""
        settings = get_settings()
        if self.backend_url:
            return settings.model_copy(update={"backend_url": self.backend_url})
        return settings

    @singleton
    @provider
    def provide_id_generator(self) -> IdGenerator:
        """Provide ULID component id generator."""
        return Generator()

    @singleton
    @provider
    def provide_gateway(self, settings: Settings) -> PersistenceGateway:
        """Provide pages API client as the persistence gateway."""
        return PagesClient(
            settings.backend_url,
            timeout=settings.backend_timeout,
            max_page_size=settings.max_page_size,
            max_tree_depth=settings.max_tree_depth,
        )

    @singleton
    @provider
    def provide_store(
        self, settings: Settings, gateway: PersistenceGateway, ids: IdGenerator
    ) -> BuilderStore:
        """Provide builder store with all dependencies."""
        return BuilderStore(
            gateway=gateway,
            ids=ids,
            max_history=settings.history_max_size,
            min_zoom=settings.min_zoom,
            max_zoom=settings.max_zoom,
        )

    @singleton
    @provider
    def provide_autosave(self, settings: Settings, store: BuilderStore) -> AutosaveTask:
        """Provide autosave loop for the store (started by the caller)."""
        return AutosaveTask(store, interval=settings.autosave_interval)


def create_container(backend_url: str | None = None) -> Injector:
    """Create configured injector and set up logging from its settings."""
    injector = Injector([BuilderModule(backend_url)])
    settings = injector.get(Settings)
    configure_logging(settings.log_level, settings.json_logs)
    return injector
