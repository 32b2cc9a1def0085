"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from portrait_booth.adapters.filesystem_layout_provider import (
    FilesystemLayoutProvider,
)
from portrait_booth.adapters.local_artifact_store import LocalArtifactStore
from portrait_booth.adapters.removebg_client import HttpxRemoveBgClient
from portrait_booth.adapters.supabase_object_storage import SupabaseObjectStorage
from portrait_booth.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from portrait_booth.config import Settings
from portrait_booth.services.cache import InMemoryCache
from portrait_booth.services.composition import CompositionService
from portrait_booth.services.layouts import LayoutService
from portrait_booth.services.retake import RetakeService
from portrait_booth.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    layout_service: LayoutService
    composition_service: CompositionService
    retake_service: RetakeService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(supabase_client)
    object_storage = SupabaseObjectStorage(
        client=supabase_client, bucket=resolved_settings.storage_bucket
    )
    removebg_client = HttpxRemoveBgClient.create(
        api_key=resolved_settings.removebg_api_key,
        url=resolved_settings.removebg_url,
        timeout_seconds=resolved_settings.removal_timeout_seconds,
    )
    layout_service = LayoutService(
        provider=FilesystemLayoutProvider(resolved_settings.assets_dir),
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.layout_cache_ttl_seconds,
    )
    composition_service = CompositionService(
        layout_service=layout_service,
        background_remover=removebg_client,
        object_storage=object_storage,
        artifact_store=LocalArtifactStore(resolved_settings.output_dir),
        session_repository=session_repository,
        default_policy=resolved_settings.placement,
        storage_folder=resolved_settings.storage_folder,
        removal_size=resolved_settings.removebg_size,
        removal_timeout_seconds=resolved_settings.removal_timeout_seconds,
        upload_timeout_seconds=resolved_settings.upload_timeout_seconds,
        flatten_color=resolved_settings.flatten_color,
    )
    retake_service = RetakeService(
        object_storage=object_storage,
        session_repository=session_repository,
        timeout_seconds=resolved_settings.upload_timeout_seconds,
    )

    async def close_resources() -> None:
        await composition_service.aclose()
        await removebg_client.close()

    return AppContainer(
        settings=resolved_settings,
        layout_service=layout_service,
        composition_service=composition_service,
        retake_service=retake_service,
        session_service=SessionService(session_repository),
        close_resources=close_resources,
    )
