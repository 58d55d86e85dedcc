from __future__ import annotations

import pytest

from logpretty.config import (
    ConfigError,
    PrettyConfig,
    apply_overrides,
    load_formatter,
    load_pretty_config,
    parse_custom_levels,
)
from logpretty.levels import LevelTable
from logpretty.paths import find_config_file


def test_defaults_without_file() -> None:
    assert load_pretty_config(None) == PrettyConfig()


def test_yaml_file_is_loaded(tmp_path) -> None:
    p = tmp_path / ".logpretty.yaml"
    p.write_text(
        "level_first: true\n"
        "message_key: message\n"
        "custom_levels:\n"
        "  35: USERLVL\n"
        "  '45': NOTICE\n"
        "formatter: json:dumps\n",
        encoding="utf-8",
    )
    cfg = load_pretty_config(p)

    assert cfg.level_first is True
    assert cfg.time_transform_only is False
    assert cfg.message_key == "message"
    assert cfg.level_key == "level"
    assert cfg.custom_levels == {35: "USERLVL", 45: "NOTICE"}
    assert cfg.formatter is not None and cfg.formatter({"a": 1}) == '{"a": 1}'


def test_wrongly_typed_values_fall_back_to_defaults(tmp_path) -> None:
    p = tmp_path / "c.yaml"
    p.write_text("level_first: 'yes'\nmessage_key: 3\n", encoding="utf-8")
    cfg = load_pretty_config(p)

    assert cfg.level_first is False
    assert cfg.message_key == "msg"


def test_empty_file_is_defaults(tmp_path) -> None:
    p = tmp_path / "c.yaml"
    p.write_text("", encoding="utf-8")
    assert load_pretty_config(p) == PrettyConfig()


def test_bad_files_raise_config_error(tmp_path) -> None:
    p = tmp_path / "c.yaml"
    p.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_pretty_config(p)

    p.write_text("key: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_pretty_config(p)


def test_parse_custom_levels() -> None:
    assert parse_custom_levels(["35=USERLVL", " 25 = VERBOSE "]) == {35: "USERLVL", 25: "VERBOSE"}
    assert parse_custom_levels(None) == {}
    for bad in (["35"], ["x=LABEL"], ["35="], "35=A", {35: ""}):
        with pytest.raises(ConfigError):
            parse_custom_levels(bad)


def test_load_formatter() -> None:
    assert load_formatter("json:dumps")({"a": 1}) == '{"a": 1}'
    for bad in ("json", "json:", ":dumps", "no_such_module_xyz:f", "json:nothing_here", "json:__name__"):
        with pytest.raises(ConfigError):
            load_formatter(bad)


def test_apply_overrides_skips_none_and_merges_levels() -> None:
    cfg = PrettyConfig(custom_levels={35: "A"}, message_key="m")
    out = apply_overrides(cfg, message_key=None, level_first=True, custom_levels={36: "B"})

    assert out.message_key == "m"
    assert out.level_first is True
    assert out.custom_levels == {35: "A", 36: "B"}
    assert cfg.level_first is False


def test_level_table() -> None:
    table = LevelTable({35: "USERLVL", 30: "NOTE"})

    assert table.label(30) == "NOTE"
    assert table.label(35) == "USERLVL"
    assert table.label(50) == "ERROR"
    assert table.label(50.0) == "ERROR"
    assert table.label(99) == "USERLVL"
    assert table.label("debug") == "DEBUG"


def test_find_config_file_walks_up(tmp_path) -> None:
    (tmp_path / ".logpretty.yaml").write_text("level_first: true\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_config_file(nested) == (tmp_path / ".logpretty.yaml").resolve()


def test_color_is_unset_unless_the_file_says_so(tmp_path) -> None:
    p = tmp_path / "c.yaml"
    p.write_text("color: false\n", encoding="utf-8")

    assert load_pretty_config(None).color is None
    assert load_pretty_config(p).color is False
