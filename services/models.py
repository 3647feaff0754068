"""Typed records decoded from the catalog endpoints and the cards derived from them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from services.errors import DecodeError


def _first_key(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _opt_str(data: Mapping[str, Any], *keys: str) -> str | None:
    value = _first_key(data, *keys)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{keys[0]} must be a string")
    return value


def _opt_bool(data: Mapping[str, Any], *keys: str) -> bool | None:
    value = _first_key(data, *keys)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise DecodeError(f"{keys[0]} must be a boolean")
    return value


def _opt_int(data: Mapping[str, Any], *keys: str) -> int | None:
    value = _first_key(data, *keys)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{keys[0]} must be an integer")
    return value


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"{what} is not an object")
    return data


def _require_product_id(data: Mapping[str, Any]) -> str:
    product_id = _opt_str(data, "product_id", "productId")
    if not product_id:
        raise DecodeError("product_id is missing")
    return product_id


def first_non_empty(*values: str | None) -> str:
    for value in values:
        if value:
            return value
    return ""


@dataclass(frozen=True)
class StationProductRecord:
    product_id: str
    enabled: bool = False
    verified: str | bool | None = None
    use_default_desktop: bool | None = None
    game_path: str | None = None
    work_path: str | None = None
    args: str | None = None
    title: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "StationProductRecord":
        data = _require_mapping(data, "station product")
        verified = _first_key(data, "verified", "available")
        if verified is not None and not isinstance(verified, (str, bool)):
            raise DecodeError("verified must be a string or a boolean")
        return cls(
            product_id=_require_product_id(data),
            enabled=bool(_opt_bool(data, "enabled")),
            verified=verified,
            use_default_desktop=_opt_bool(data, "use_default_desktop", "useDefaultDesktop"),
            game_path=_opt_str(data, "game_path", "gamePath"),
            work_path=_opt_str(data, "work_path", "workPath"),
            args=_opt_str(data, "args"),
            title=_opt_str(data, "title"),
        )


@dataclass(frozen=True)
class ProductMetaRecord:
    product_id: str
    title: str | None = None
    display_name: str | None = None
    description: str | None = None
    card_picture: str | None = None
    required_account: str | None = None
    no_license_required: bool | None = None
    use_default_desktop: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "ProductMetaRecord":
        data = _require_mapping(data, "product")
        return cls(
            product_id=_require_product_id(data),
            title=_opt_str(data, "title"),
            display_name=_opt_str(data, "displayName", "display_name"),
            description=_opt_str(data, "descriptionRu", "description_ru"),
            card_picture=_opt_str(data, "cardPicture", "card_picture"),
            required_account=_opt_str(data, "requiredAccount", "required_account"),
            # the catalog spells this field "noLicenseRequred"
            no_license_required=_opt_bool(data, "noLicenseRequred", "noLicenseRequired", "no_license_required"),
            use_default_desktop=_opt_bool(data, "useDefaultDesktop", "use_default_desktop"),
        )


@dataclass(frozen=True)
class LaunchParams:
    exe_path: str = ""
    work_dir: str = ""
    args: str = ""

    @classmethod
    def from_station(cls, record: StationProductRecord) -> "LaunchParams":
        return cls(
            exe_path=record.game_path or "",
            work_dir=record.work_path or "",
            args=record.args or "",
        )

    @classmethod
    def from_details(cls, data: Any) -> "LaunchParams":
        """Resolve launch fields from a per-product details payload.

        Explicit overrides win over the ``default*`` fields; empty strings
        fall through to the next candidate.
        """
        data = _require_mapping(data, "launch details")
        return cls(
            exe_path=first_non_empty(
                _opt_str(data, "gamePath"),
                _opt_str(data, "game_path"),
                _opt_str(data, "defaultGamePath"),
                _opt_str(data, "default_game_path"),
            ),
            work_dir=first_non_empty(
                _opt_str(data, "workPath"),
                _opt_str(data, "work_path"),
                _opt_str(data, "defaultWorkPath"),
                _opt_str(data, "default_work_path"),
            ),
            args=first_non_empty(
                _opt_str(data, "args"),
                _opt_str(data, "defaultArgs"),
                _opt_str(data, "default_args"),
            ),
        )


@dataclass(frozen=True)
class Card:
    product_id: str
    title: str
    image_url: str = ""
    alt: str = ""
    required_account: str = ""
    is_free: bool = False
    is_desktop: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "title": self.title,
            "imageUrl": self.image_url,
            "alt": self.alt,
            "requiredAccount": self.required_account,
            "isFree": self.is_free,
            "isDesktop": self.is_desktop,
        }


@dataclass(frozen=True)
class StationInfo:
    station_uuid: str
    auth_token: str = field(repr=False)


@dataclass(frozen=True)
class GraphicAdapter:
    name: str | None = None
    ram_bytes: int | None = None


@dataclass(frozen=True)
class HardwareInfo:
    ram_bytes: int | None = None
    processor: str | None = None
    graphics: tuple[GraphicAdapter, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "HardwareInfo":
        data = _require_mapping(data, "hardware")
        processor = data.get("processor")
        processor_version = None
        if processor is not None:
            processor_version = _opt_str(_require_mapping(processor, "processor"), "version")
        graphics_raw = data.get("graphic") or []
        if not isinstance(graphics_raw, list):
            raise DecodeError("graphic must be a list")
        graphics = tuple(
            GraphicAdapter(
                name=_opt_str(_require_mapping(item, "graphic"), "name"),
                ram_bytes=_opt_int(item, "ram_bytes"),
            )
            for item in graphics_raw
        )
        return cls(ram_bytes=_opt_int(data, "ram_bytes"), processor=processor_version, graphics=graphics)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ram_bytes": self.ram_bytes,
            "processor": {"version": self.processor},
            "graphic": [{"name": item.name, "ram_bytes": item.ram_bytes} for item in self.graphics],
        }


@dataclass(frozen=True)
class StationDetails:
    name: str
    description: str
    hardware: HardwareInfo

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "hardware": self.hardware.to_dict(),
        }
