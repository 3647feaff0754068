from __future__ import annotations

import logging

import pytest

from services.errors import MissingCredentialsError
from services.station_info import EnvStationInfoProvider, RegistryAccessor, RegistryStationInfoProvider


class FakeRegistry(RegistryAccessor):
    def __init__(self, initial: dict[tuple[str, str], str | int] | None = None) -> None:
        self.values = initial or {}

    def get_value(self, path: str, value_name: str) -> str | int | None:
        return self.values.get((path, value_name))


def test_env_provider_reads_uuid_and_token() -> None:
    provider = EnvStationInfoProvider({"DROVA_STATION_UUID": "uuid-env", "DROVA_AUTH_TOKEN": "token-env"})
    info = provider.get_station_info()
    assert info.station_uuid == "uuid-env"
    assert info.auth_token == "token-env"


def test_env_provider_reports_missing_variable() -> None:
    provider = EnvStationInfoProvider({"DROVA_STATION_UUID": "uuid-env"})
    with pytest.raises(MissingCredentialsError) as excinfo:
        provider.get_station_info()
    assert str(excinfo.value) == "DROVA_AUTH_TOKEN не задан"


def test_env_provider_never_logs_token(caplog: pytest.LogCaptureFixture) -> None:
    provider = EnvStationInfoProvider({"DROVA_STATION_UUID": "uuid-env", "DROVA_AUTH_TOKEN": "super-secret"})
    with caplog.at_level(logging.DEBUG, logger="services.station_info"):
        info = provider.get_station_info()
    assert "uuid-env" in caplog.text
    assert "token_len=12" in caplog.text
    assert "super-secret" not in caplog.text
    assert "super-secret" not in repr(info)


def test_env_provider_loads_dotenv_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DROVA_STATION_UUID", raising=False)
    monkeypatch.delenv("DROVA_AUTH_TOKEN", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("DROVA_STATION_UUID=uuid-file\nDROVA_AUTH_TOKEN=token-file\n", encoding="utf-8")
    info = EnvStationInfoProvider(dotenv_path=env_file).get_station_info()
    assert info.station_uuid == "uuid-file"
    assert info.auth_token == "token-file"
    monkeypatch.delenv("DROVA_STATION_UUID", raising=False)
    monkeypatch.delenv("DROVA_AUTH_TOKEN", raising=False)


def test_registry_provider_follows_last_server() -> None:
    registry = FakeRegistry(
        {
            (r"HKLM:\SOFTWARE\ITKey\Esme", "last_server"): "uuid-reg",
            (r"HKLM:\SOFTWARE\ITKey\Esme\servers\uuid-reg", "auth_token"): "token-reg",
        }
    )
    info = RegistryStationInfoProvider(registry).get_station_info()
    assert info.station_uuid == "uuid-reg"
    assert info.auth_token == "token-reg"


def test_registry_provider_missing_token() -> None:
    registry = FakeRegistry({(r"HKLM:\SOFTWARE\ITKey\Esme", "last_server"): "uuid-reg"})
    with pytest.raises(MissingCredentialsError):
        RegistryStationInfoProvider(registry).get_station_info()


SECRET = "tok-7f3a9c-very-distinctive"


def test_registry_provider_never_logs_token(caplog: pytest.LogCaptureFixture) -> None:
    registry = FakeRegistry(
        {
            (r"HKLM:\SOFTWARE\ITKey\Esme", "last_server"): "uuid-reg",
            (r"HKLM:\SOFTWARE\ITKey\Esme\servers\uuid-reg", "auth_token"): SECRET,
        }
    )
    with caplog.at_level(logging.DEBUG, logger="services.station_info"):
        info = RegistryStationInfoProvider(registry).get_station_info()
    assert info.auth_token == SECRET
    assert "uuid-reg" in caplog.text
    assert SECRET not in caplog.text
    assert SECRET not in repr(info)


def test_missing_uuid_error_does_not_leak_token(caplog: pytest.LogCaptureFixture) -> None:
    env_provider = EnvStationInfoProvider({"DROVA_AUTH_TOKEN": SECRET})
    registry_provider = RegistryStationInfoProvider(
        FakeRegistry({(r"HKLM:\SOFTWARE\ITKey\Esme\servers\uuid-reg", "auth_token"): SECRET})
    )
    with caplog.at_level(logging.DEBUG, logger="services.station_info"):
        for provider in (env_provider, registry_provider):
            with pytest.raises(MissingCredentialsError) as excinfo:
                provider.get_station_info()
            assert SECRET not in str(excinfo.value)
    assert SECRET not in caplog.text
