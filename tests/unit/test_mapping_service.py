"""
Unit tests for the dropdown mapping table.

Run: pytest tests/unit/test_mapping_service.py -v
"""

import json
import pytest

from services.mapping_service import (
    EMPTY_MAPPING,
    build_mapping_table,
    extract_pairs,
    load_mapping_file,
)
from exceptions import ConfigLoadError


# ===================
# BUILD
# ===================

class TestBuildMappingTable:
    """Tests for build_mapping_table()"""

    def test_forward_matches_input(self):
        """Forward mapping holds every pair unchanged."""
        raw = {"random position": "ランダムな位置", "left-right": "左右のみ"}

        table = build_mapping_table(raw)

        assert dict(table.forward) == raw

    def test_inverse_round_trips_unique_values(self):
        """inverse(forward(v)) == v when target values are unique."""
        raw = {
            "random position": "ランダムな位置",
            "mouse-pointer": "マウスのポインター",
            "costume1": "コスチューム1",
            "Meow": "ニャー",
        }

        table = build_mapping_table(raw)

        for source_value in raw:
            assert table.inverse[table.forward[source_value]] == source_value

    def test_inverse_collision_last_write_wins(self):
        """Two keys sharing a target: the later key owns the inverse entry."""
        table = build_mapping_table({"any": "どれか", "anything": "どれか"})

        assert table.inverse == {"どれか": "anything"}
        assert len(table.forward) == 2

    def test_forward_is_a_copy(self):
        """Mutating the raw dict afterwards does not affect the table."""
        raw = {"red": "赤"}
        table = build_mapping_table(raw)

        raw["blue"] = "青"

        assert "blue" not in table.forward

    def test_table_is_read_only(self):
        """Forward and inverse cannot be mutated."""
        table = build_mapping_table({"red": "赤"})

        with pytest.raises(TypeError):
            table.forward["blue"] = "青"
        with pytest.raises(TypeError):
            table.inverse["青"] = "blue"

    def test_non_string_values_pass_through(self):
        """Values are not validated."""
        table = build_mapping_table({"ten": 10})

        assert table.forward["ten"] == 10
        assert table.inverse[10] == "ten"

    def test_unhashable_values_skip_inverse(self):
        """Array and object values stay in forward and have no inverse entry."""
        raw = {"a": ["x"], "b": {"k": 1}, "c": "シー"}

        table = build_mapping_table(raw)

        assert dict(table.forward) == raw
        assert dict(table.inverse) == {"シー": "c"}

    def test_empty_table(self):
        """Empty input gives empty mappings."""
        table = build_mapping_table({})

        assert len(table) == 0
        assert dict(table.inverse) == {}


# ===================
# DIRECTION SELECTION
# ===================

class TestForLocales:
    """Tests for MappingTable.for_locales()"""

    def test_forward_direction(self):
        table = build_mapping_table({"red": "赤"}, "en", "ja")

        assert table.for_locales("en", "ja") is table.forward

    def test_reverse_direction_uses_inverse(self):
        table = build_mapping_table({"red": "赤"}, "en", "ja")

        assert table.for_locales("ja", "en") is table.inverse

    def test_same_locale_is_empty(self):
        table = build_mapping_table({"red": "赤"}, "en", "ja")

        assert table.for_locales("en", "en") is EMPTY_MAPPING

    def test_uncovered_pair_is_none(self):
        table = build_mapping_table({"red": "赤"}, "en", "ja")

        assert table.for_locales("en", "fr") is None

    def test_pair_label(self):
        table = build_mapping_table({}, "en", "ja")

        assert table.pair == "en-to-ja"


# ===================
# FILE LOADING
# ===================

class TestLoadMappingFile:
    """Tests for load_mapping_file() and extract_pairs()"""

    def test_flat_mapping(self, tmp_path):
        """A flat JSON object is the mapping."""
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"red": "赤"}), encoding="utf-8")

        table = load_mapping_file(path)

        assert dict(table.forward) == {"red": "赤"}

    def test_wrapped_mapping(self, tmp_path):
        """A "dropdowns" field holds the mapping."""
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"dropdowns": {"red": "赤"}}), encoding="utf-8")

        table = load_mapping_file(path)

        assert dict(table.forward) == {"red": "赤"}

    def test_locales_recorded(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text("{}", encoding="utf-8")

        table = load_mapping_file(path, source_locale="en", target_locale="zh-cn")

        assert table.pair == "en-to-zh-cn"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigLoadError) as exc_info:
            load_mapping_file(tmp_path / "nope.json")

        assert exc_info.value.code == "CONFIG_LOAD_FAILED"
        assert exc_info.value.details["artifact"] == "dropdown mapping"

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            load_mapping_file(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text('["red", "赤"]', encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            load_mapping_file(path)

    def test_array_values_load(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"dropdowns": {"a": ["x"], "red": "赤"}}), encoding="utf-8")

        table = load_mapping_file(path)

        assert table.forward["a"] == ["x"]
        assert table.inverse["赤"] == "red"

    def test_extract_pairs_ignores_non_dict_dropdowns(self):
        """A "dropdowns" key that is not an object is just another entry."""
        raw = {"dropdowns": "ドロップダウン"}

        assert extract_pairs(raw) == raw

    def test_shipped_mapping(self, mapping_table):
        """data/dropdown_map.json loads and covers the common values."""
        assert mapping_table.forward["random position"] == "ランダムな位置"
        assert mapping_table.inverse["ランダムな位置"] == "random position"
        assert mapping_table.pair == "en-to-ja"
