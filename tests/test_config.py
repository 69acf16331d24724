"""Tests for rules configuration."""

import json

from gigmaster.config import DEFAULT_RULES, load_rules, resolve_rules, save_rules


class TestResolveRules:
    def test_defaults(self):
        rules = resolve_rules()
        assert rules == DEFAULT_RULES
        assert rules is not DEFAULT_RULES

    def test_partial_override(self):
        rules = resolve_rules({"band_grace_weeks": 8})
        assert rules["band_grace_weeks"] == 8
        assert rules["sandbox_milestone_week"] == 100


class TestLoadRules:
    """JSON rules files."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_rules(tmp_path / "rules.json") == DEFAULT_RULES

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "nested" / "rules.json"
        assert save_rules(resolve_rules({"percentage_cap": 95}), path) is True
        assert load_rules(path)["percentage_cap"] == 95

    def test_unknown_keys_dropped(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"hit_popularity": 70, "cheat_mode": True}), encoding="utf-8")

        rules = load_rules(path)
        assert rules["hit_popularity"] == 70
        assert "cheat_mode" not in rules

    def test_corrupt_file_falls_back(self, tmp_path, caplog):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_rules(path) == DEFAULT_RULES
        assert "rules.json" in caplog.text

    def test_non_object_falls_back(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_rules(path) == DEFAULT_RULES
