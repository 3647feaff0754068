"""Immutable endpoints, identifiers and localized strings of the station launcher."""
from __future__ import annotations

import urllib.parse
from dataclasses import dataclass


def _segment(value: str) -> str:
    return urllib.parse.quote(value, safe="")


@dataclass(frozen=True)
class Endpoints:
    base_url: str = "https://services.drova.io"
    station_products: str = "/product-manager/serverproduct/list/{station_uuid}"
    products_full: str = "/product-manager/product/listfull2?limit=2000"
    launch_details: str = "/product-manager/serverproduct/{station_uuid}/{product_id}"
    station_info: str = "/server-manager/servers/public/{station_uuid}"
    station_hardware: str = "/server-manager/hardware/list/{station_uuid}"

    def with_base(self, base_url: str) -> "Endpoints":
        return Endpoints(
            base_url=base_url.rstrip("/") or self.base_url,
            station_products=self.station_products,
            products_full=self.products_full,
            launch_details=self.launch_details,
            station_info=self.station_info,
            station_hardware=self.station_hardware,
        )

    def station_products_url(self, station_uuid: str) -> str:
        return self._join(self.station_products.format(station_uuid=_segment(station_uuid)))

    def products_full_url(self) -> str:
        return self._join(self.products_full)

    def launch_details_url(self, station_uuid: str, product_id: str) -> str:
        return self._join(
            self.launch_details.format(station_uuid=_segment(station_uuid), product_id=_segment(product_id))
        )

    def station_info_url(self, station_uuid: str) -> str:
        return self._join(self.station_info.format(station_uuid=_segment(station_uuid)))

    def station_hardware_url(self, station_uuid: str) -> str:
        return self._join(self.station_hardware.format(station_uuid=_segment(station_uuid)))

    def _join(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")


@dataclass(frozen=True)
class StatusMessages:
    credentials: str = "Получаем токен и UUID станции…"
    station_products: str = "Загружаем список игр…"
    catalog: str = "Загружаем каталог игр…"
    launch_details: str = "Загружаем параметры запуска…"
    resources: str = "Загружаем ресурсы…"
    loading: str = "Загрузка…"
    progress_sub: str = "Получено {current}/{total}"
    load_failed: str = "Ошибка загрузки данных"
    launch_failed: str = "Ошибка запуска"


@dataclass(frozen=True)
class ErrorMessages:
    empty_catalog: str = "Список игр пуст"
    launch_not_found: str = "Не найдено описание запуска"
    empty_launch_path: str = "Пустой путь запуска"
    state_locked: str = "Состояние заблокировано"
    file_url: str = "Не удалось создать file URL"
    env_missing: str = "{name} не задан"
    registry_missing: str = "Не удалось прочитать реестр: {detail}"
    decode: str = "Некорректный ответ сервера: {detail}"
    transport: str = "Ошибка сети: {detail}"
    http_status: str = "HTTP {code}"


DEFAULT_ENDPOINTS = Endpoints()
STATUS = StatusMessages()
ERRORS = ErrorMessages()

DESKTOP_PRODUCT_ID = "9fd0eb43-b2bb-4ce3-93b8-9df63f209098"
DESKTOP_SENTINEL_ID = "desktop"
DESKTOP_TITLE = "desktop"
DESKTOP_DISPLAY_NAME = "рабочий стол"

DEFAULT_TITLE = "Игра"
ALT_MAX_CHARS = 100
READY_MARKER = "READY"

CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_DEFAULT_EXTENSION = "img"

AUTH_HEADER = "X-Auth-Token"

FALLBACK_DESKTOP_TITLE = "Рабочий стол"
FALLBACK_DESKTOP_ALT = "Доступ ко всему почти без ограничений."

REGISTRY_STATION_KEY = r"HKLM:\SOFTWARE\ITKey\Esme"
REGISTRY_STATION_VALUE = "last_server"
REGISTRY_SERVER_KEY = r"HKLM:\SOFTWARE\ITKey\Esme\servers\{station_uuid}"
REGISTRY_TOKEN_VALUE = "auth_token"

ENV_STATION_UUID = "DROVA_STATION_UUID"
ENV_AUTH_TOKEN = "DROVA_AUTH_TOKEN"
