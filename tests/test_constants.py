"""Regression checks for endpoint templates and identifiers."""
from __future__ import annotations

from launcher_config.constants import (
    CACHE_TTL_SECONDS,
    DEFAULT_ENDPOINTS,
    DESKTOP_PRODUCT_ID,
    ERRORS,
)


def test_station_products_url() -> None:
    assert (
        DEFAULT_ENDPOINTS.station_products_url("uuid-1")
        == "https://services.drova.io/product-manager/serverproduct/list/uuid-1"
    )


def test_station_info_url() -> None:
    assert (
        DEFAULT_ENDPOINTS.station_info_url("uuid-1")
        == "https://services.drova.io/server-manager/servers/public/uuid-1"
    )


def test_station_hardware_url() -> None:
    assert (
        DEFAULT_ENDPOINTS.station_hardware_url("uuid-1")
        == "https://services.drova.io/server-manager/hardware/list/uuid-1"
    )


def test_products_full_url() -> None:
    assert (
        DEFAULT_ENDPOINTS.products_full_url()
        == "https://services.drova.io/product-manager/product/listfull2?limit=2000"
    )


def test_with_base_keeps_templates() -> None:
    endpoints = DEFAULT_ENDPOINTS.with_base("http://localhost:8080/")
    assert endpoints.launch_details_url("s", "p") == "http://localhost:8080/product-manager/serverproduct/s/p"


def test_desktop_id_and_ttl() -> None:
    assert DESKTOP_PRODUCT_ID == "9fd0eb43-b2bb-4ce3-93b8-9df63f209098"
    assert CACHE_TTL_SECONDS == 86400


def test_user_facing_messages_are_localized() -> None:
    assert ERRORS.empty_catalog == "Список игр пуст"
    assert ERRORS.launch_not_found == "Не найдено описание запуска"
    assert ERRORS.empty_launch_path == "Пустой путь запуска"


def test_path_segments_are_quoted() -> None:
    assert (
        DEFAULT_ENDPOINTS.launch_details_url("uuid 1", "a/b?c")
        == "https://services.drova.io/product-manager/serverproduct/uuid%201/a%2Fb%3Fc"
    )
