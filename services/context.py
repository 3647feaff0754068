"""Top-level owner of the shared launch state and the services built on it."""
from __future__ import annotations

from dataclasses import dataclass

from launcher_config.constants import DEFAULT_ENDPOINTS
from launcher_config.user_settings import LaunchSource, LauncherSettings
from services.aggregator import CatalogAggregator, FetchedLaunchDetails, InlineLaunchDetails, LaunchDetailResolver
from services.catalog import CatalogClient
from services.image_cache import ImageCache
from services.launcher import LaunchResolver, ProcessSpawner, ShellControl
from services.state import SharedLaunchState
from services.station_info import StationInfoProvider, default_station_info_provider


@dataclass
class LauncherContext:
    settings: LauncherSettings
    state: SharedLaunchState
    client: CatalogClient
    aggregator: CatalogAggregator
    launcher: LaunchResolver


def create_context(
    settings: LauncherSettings,
    shell: ShellControl,
    *,
    client: CatalogClient | None = None,
    station_provider: StationInfoProvider | None = None,
    spawner: ProcessSpawner | None = None,
    state: SharedLaunchState | None = None,
) -> LauncherContext:
    state = state or SharedLaunchState()
    client = client or CatalogClient(
        DEFAULT_ENDPOINTS.with_base(settings.api_base_url),
        timeout=settings.http_timeout,
    )
    launch_details: LaunchDetailResolver
    if settings.launch_source is LaunchSource.DETAILS:
        launch_details = FetchedLaunchDetails(client)
    else:
        launch_details = InlineLaunchDetails()
    image_cache = None
    if settings.image_cache_enabled:
        image_cache = ImageCache(settings.cache_directory(), client.get_bytes)
    aggregator = CatalogAggregator(
        client,
        state,
        station_provider or default_station_info_provider(),
        launch_details=launch_details,
        image_cache=image_cache,
        desktop_policy=settings.desktop_policy,
        catalog_requires_auth=settings.catalog_requires_auth,
    )
    launcher = LaunchResolver(
        state,
        shell,
        spawner=spawner,
        args_mode=settings.args_mode,
        dry_run=settings.dry_run_launch,
        exit_after_launch=settings.exit_after_launch,
    )
    return LauncherContext(settings=settings, state=state, client=client, aggregator=aggregator, launcher=launcher)
