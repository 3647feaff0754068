"""Catalog aggregation: station products + product metadata -> cards and launch table."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Protocol, Sequence

from launcher_config.constants import (
    ALT_MAX_CHARS,
    DEFAULT_TITLE,
    DESKTOP_DISPLAY_NAME,
    DESKTOP_PRODUCT_ID,
    DESKTOP_SENTINEL_ID,
    DESKTOP_TITLE,
    FALLBACK_DESKTOP_ALT,
    FALLBACK_DESKTOP_TITLE,
    READY_MARKER,
    STATUS,
)
from launcher_config.user_settings import DesktopPolicy
from services.catalog import CatalogClient
from services.errors import EmptyCatalogError, LauncherError
from services.image_cache import ImageCache
from services.models import (
    Card,
    HardwareInfo,
    LaunchParams,
    ProductMetaRecord,
    StationDetails,
    StationInfo,
    StationProductRecord,
    first_non_empty,
)
from services.progress import NullProgressReporter, ProgressReporter, safe_report
from services.state import SharedLaunchState
from services.station_info import StationInfoProvider

logger = logging.getLogger(__name__)


def is_station_product_ready(record: StationProductRecord) -> bool:
    if not record.enabled:
        return False
    indicator = record.verified
    if indicator is None:
        return True
    if isinstance(indicator, bool):
        return indicator
    return indicator.upper() == READY_MARKER


def build_product_map(products: Iterable[ProductMetaRecord]) -> dict[str, ProductMetaRecord]:
    # later duplicates overwrite earlier ones
    product_map: dict[str, ProductMetaRecord] = {}
    for product in products:
        product_map[product.product_id] = product
    return product_map


def truncate_chars(value: str, max_chars: int) -> str:
    return value[:max_chars]


def resolve_title(record: StationProductRecord, meta: ProductMetaRecord | None) -> str:
    return first_non_empty(
        meta.display_name if meta else None,
        meta.title if meta else None,
        record.title,
        DEFAULT_TITLE,
    )


def is_desktop_product(
    record: StationProductRecord,
    meta: ProductMetaRecord | None,
    policy: DesktopPolicy = DesktopPolicy.IDENTITY,
) -> bool:
    """Classify the virtual "desktop" entry.

    Matches the well-known product id, a title of "desktop" or a display
    name of "рабочий стол" (case-insensitive, exact). ``FLAGGED`` also
    honours ``use_default_desktop`` on either record.
    """
    if record.product_id == DESKTOP_PRODUCT_ID:
        return True
    if policy is DesktopPolicy.FLAGGED:
        if record.use_default_desktop or (meta is not None and meta.use_default_desktop):
            return True
    title = first_non_empty(meta.title if meta else None, record.title)
    if title.lower() == DESKTOP_TITLE:
        return True
    display_name = (meta.display_name if meta else None) or ""
    return display_name.lower() == DESKTOP_DISPLAY_NAME


def build_desktop_set(
    records: Iterable[StationProductRecord],
    product_map: Mapping[str, ProductMetaRecord],
    policy: DesktopPolicy = DesktopPolicy.IDENTITY,
) -> set[str]:
    return {
        record.product_id
        for record in records
        if is_desktop_product(record, product_map.get(record.product_id), policy)
    }


def build_fallback_desktop_card() -> Card:
    return Card(
        product_id=DESKTOP_SENTINEL_ID,
        title=FALLBACK_DESKTOP_TITLE,
        image_url="",
        alt=FALLBACK_DESKTOP_ALT,
        required_account="",
        is_free=True,
        is_desktop=True,
    )


class LaunchDetailResolver(Protocol):
    def resolve(
        self,
        records: Sequence[StationProductRecord],
        station: StationInfo,
        reporter: ProgressReporter,
    ) -> dict[str, LaunchParams]:  # pragma: no cover - protocol
        ...


class InlineLaunchDetails:
    """Launch fields embedded in the station product list."""

    def resolve(
        self,
        records: Sequence[StationProductRecord],
        station: StationInfo,
        reporter: ProgressReporter,
    ) -> dict[str, LaunchParams]:
        return {record.product_id: LaunchParams.from_station(record) for record in records}


class FetchedLaunchDetails:
    """One authenticated details request per ready product, in catalog order."""

    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    def resolve(
        self,
        records: Sequence[StationProductRecord],
        station: StationInfo,
        reporter: ProgressReporter,
    ) -> dict[str, LaunchParams]:
        launches: dict[str, LaunchParams] = {}
        total = len(records)
        safe_report(reporter, STATUS.launch_details)
        for index, record in enumerate(records):
            launches[record.product_id] = self._client.fetch_launch_details(
                station.station_uuid,
                record.product_id,
                station.auth_token,
            )
            safe_report(reporter, STATUS.launch_details, index + 1, total)
        return launches


class CatalogAggregator:
    def __init__(
        self,
        client: CatalogClient,
        state: SharedLaunchState,
        station_provider: StationInfoProvider,
        *,
        launch_details: LaunchDetailResolver | None = None,
        image_cache: ImageCache | None = None,
        desktop_policy: DesktopPolicy = DesktopPolicy.IDENTITY,
        catalog_requires_auth: bool = False,
    ) -> None:
        self._client = client
        self._state = state
        self._station_provider = station_provider
        self._launch_details = launch_details or InlineLaunchDetails()
        self._image_cache = image_cache
        self._desktop_policy = desktop_policy
        self._catalog_requires_auth = catalog_requires_auth

    def load_cards(self, reporter: ProgressReporter | None = None) -> list[Card]:
        reporter = reporter or NullProgressReporter()

        safe_report(reporter, STATUS.credentials)
        station = self._station_provider.get_station_info()

        safe_report(reporter, STATUS.station_products)
        station_products = self._client.fetch_station_products(station.station_uuid, station.auth_token)
        ready = [record for record in station_products if is_station_product_ready(record)]
        logger.debug("Station products: %d total, %d ready", len(station_products), len(ready))
        if not ready:
            raise EmptyCatalogError()

        safe_report(reporter, STATUS.catalog)
        token = station.auth_token if self._catalog_requires_auth else None
        product_map = build_product_map(self._client.fetch_products_full(token))

        desktop_ids = build_desktop_set(ready, product_map, self._desktop_policy)
        launches = self._launch_details.resolve(ready, station, reporter)

        safe_report(reporter, STATUS.resources)
        cards: list[Card] = []
        total = len(ready)
        for index, record in enumerate(ready):
            safe_report(reporter, STATUS.resources, index + 1, total)
            cards.append(self._build_card(record, product_map.get(record.product_id)))

        self._state.replace(launches, desktop_ids)
        logger.info("Loaded %d card(s), %d desktop id(s)", len(cards), len(desktop_ids))
        if logger.isEnabledFor(logging.DEBUG):
            self._log_launch_table()
        return cards

    def _log_launch_table(self) -> None:
        launches, desktop_ids = self._state.snapshot()
        for product_id, params in launches.items():
            kind = "desktop" if product_id in desktop_ids else "launch"
            logger.debug(
                "%s %s: exe=%r work_dir=%r args=%r",
                kind,
                product_id,
                params.exe_path,
                params.work_dir,
                params.args,
            )

    def load_station_details(self) -> StationDetails:
        station = self._station_provider.get_station_info()
        info = self._client.fetch_station_info(station.station_uuid)
        try:
            hardware = self._client.fetch_station_hardware(station.station_uuid)
        except LauncherError as exc:
            logger.warning("Failed to load hardware info: %s", exc)
            hardware = HardwareInfo()
        return StationDetails(name=info["name"], description=info["description"], hardware=hardware)

    def _build_card(self, record: StationProductRecord, meta: ProductMetaRecord | None) -> Card:
        return Card(
            product_id=record.product_id,
            title=resolve_title(record, meta),
            image_url=self._resolve_image(meta.card_picture if meta else None),
            alt=truncate_chars((meta.description if meta else None) or "", ALT_MAX_CHARS),
            required_account=(meta.required_account if meta else None) or "",
            is_free=bool(meta.no_license_required) if meta else False,
            is_desktop=is_desktop_product(record, meta, self._desktop_policy),
        )

    def _resolve_image(self, url: str | None) -> str:
        if not url:
            return ""
        if self._image_cache is None:
            return url
        return self._image_cache.resolve(url)
