from pathlib import Path

from pi_relay_bridge.config import (
    SessionConfig,
    default_settings_path,
    load_settings,
    parse_settings,
)


def test_load_settings_defaults_when_file_missing(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "settings.dat")

    assert settings.broker == "192.168.0.1"
    assert settings.topic == "relays"
    assert settings.port == 1883
    assert settings.keepalive == 60
    assert settings.qos == 1
    assert settings.source is None


def test_load_settings_reads_topic_and_broker(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.dat"
    settings_path.write_text("TOPIC office/relays\nBROKER 10.0.0.5\n", encoding="utf-8")

    settings = load_settings(settings_path)

    assert settings.broker == "10.0.0.5"
    assert settings.topic == "office/relays"
    assert settings.source == settings_path


def test_load_settings_comments_only_yields_defaults(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.dat"
    settings_path.write_text("# comment\n# TOPIC other\n", encoding="utf-8")

    settings = load_settings(settings_path)

    assert (settings.broker, settings.topic) == ("192.168.0.1", "relays")


def test_load_settings_is_idempotent(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.dat"
    settings_path.write_text("broker mqtt.local\n", encoding="utf-8")

    assert load_settings(settings_path) == load_settings(settings_path)


def test_load_settings_directory_falls_back_to_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)

    assert settings == SessionConfig()


def test_load_settings_logs_summary(tmp_path: Path, caplog) -> None:
    caplog.set_level("INFO")
    settings_path = tmp_path / "settings.dat"
    settings_path.write_text("TOPIC garage\n", encoding="utf-8")

    load_settings(settings_path)

    assert "TOPIC: garage" in caplog.text
    assert "BROKER: 192.168.0.1" in caplog.text


def test_parse_settings_labels_are_case_insensitive() -> None:
    settings = parse_settings(["topic lights", "Broker 10.1.1.1"])

    assert settings.topic == "lights"
    assert settings.broker == "10.1.1.1"


def test_parse_settings_ignores_unknown_labels_and_blank_lines() -> None:
    settings = parse_settings(["", "   ", "PORT 8883", "TOPIC lab"])

    assert settings.topic == "lab"
    assert settings.port == 1883


def test_parse_settings_label_without_value_keeps_default() -> None:
    settings = parse_settings(["TOPIC", "BROKER   "])

    assert settings == SessionConfig()


def test_parse_settings_takes_first_value_token() -> None:
    settings = parse_settings(["TOPIC  \thome/relays  trailing words"])

    assert settings.topic == "home/relays"


def test_parse_settings_later_lines_win() -> None:
    settings = parse_settings(["TOPIC first", "TOPIC second"])

    assert settings.topic == "second"


def test_default_settings_path_sits_beside_executable() -> None:
    assert default_settings_path("/opt/relays/bin/pi-relay-bridge") == Path(
        "/opt/relays/bin/settings.dat"
    )
    assert default_settings_path("pi-relay-bridge") == Path("settings.dat")
