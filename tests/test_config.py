"""
Unit tests for AutotileConfig and the settings bridge.
"""

import pytest

from autotile.config import AutotileConfig, InsertPosition, parse_insert_position
from autotile.settings import SETTING_POLICIES, SettingPolicy, SettingsSnapshot


@pytest.mark.unit
class TestAutotileConfig:
    """Test configuration defaults, clamping and setters."""

    def test_defaults(self):
        """Test default values."""
        config = AutotileConfig()

        assert config.algorithm_id == "master-stack"
        assert config.split_ratio == pytest.approx(0.6)
        assert config.master_count == 1
        assert config.inner_gap == 8
        assert config.outer_gap == 8
        assert config.insert_position is InsertPosition.END
        assert config.focus_new_windows is True
        assert config.focus_follows_mouse is False
        assert config.monocle_hide_others is True
        assert config.smart_gaps is True

    def test_from_json_ignores_infinities(self):
        """Test infinite numbers are dropped instead of raising."""
        config = AutotileConfig.from_json(
            {"masterCount": float("inf"), "innerGap": float("-inf"), "outerGap": 4}
        )

        assert config.master_count == 1
        assert config.inner_gap == 8
        assert config.outer_gap == 4
        assert config.respect_minimum_size is True

    def test_constructor_clamps(self):
        """Test out-of-range constructor values are clamped."""
        config = AutotileConfig(
            algorithm_id="",
            split_ratio=2.0,
            master_count=0,
            inner_gap=-4,
            outer_gap=500,
            insert_position="sideways",
        )

        assert config.algorithm_id == "master-stack"
        assert config.split_ratio == pytest.approx(0.9)
        assert config.master_count == 1
        assert config.inner_gap == 0
        assert config.outer_gap == 50
        assert config.insert_position is InsertPosition.END

    def test_setters_report_changes(self):
        """Test setters return True only when the value changed."""
        config = AutotileConfig()

        assert config.set_master_count(3)
        assert not config.set_master_count(3)
        assert config.set_split_ratio(0.95)
        assert config.split_ratio == pytest.approx(0.9)
        assert not config.set_split_ratio(0.9)
        assert config.set_inner_gap(60)
        assert config.inner_gap == 50
        assert not config.set_algorithm_id("")

    def test_set_flag(self):
        """Test boolean flags are set by field name."""
        config = AutotileConfig()

        assert config.set_flag("smart_gaps", False)
        assert config.smart_gaps is False
        assert not config.set_flag("smart_gaps", False)

    def test_set_unknown_flag(self):
        """Test unknown flag names raise ValueError."""
        with pytest.raises(ValueError):
            AutotileConfig().set_flag("inner_gap", True)

    def test_tolerant_equality(self):
        """Test ratios that differ by float noise compare equal."""
        a = AutotileConfig(split_ratio=0.3)
        b = AutotileConfig(split_ratio=0.1 + 0.2)

        assert a == b
        assert a != AutotileConfig(split_ratio=0.4)

    def test_copy_is_independent(self):
        """Test copies don't share changes."""
        config = AutotileConfig()
        copy = config.copy()

        copy.set_master_count(4)

        assert config.master_count == 1

    def test_json_round_trip(self):
        """Test to_json/from_json with camelCase keys."""
        config = AutotileConfig(
            algorithm_id="bsp",
            master_count=2,
            insert_position=InsertPosition.AS_MASTER,
            monocle_show_tabs=True,
        )

        data = config.to_json()

        assert data["algorithmId"] == "bsp"
        assert data["insertPosition"] == "asMaster"
        assert data["monocleShowTabs"] is True
        assert AutotileConfig.from_json(data) == config

    def test_from_json_tolerates_bad_values(self):
        """Test bad entries fall back to defaults, good ones still apply."""
        config = AutotileConfig.from_json(
            {
                "algorithmId": 7,
                "splitRatio": "half",
                "masterCount": 3,
                "innerGap": None,
                "smartGaps": "yes",
            }
        )

        assert config.algorithm_id == "master-stack"
        assert config.split_ratio == pytest.approx(0.6)
        assert config.master_count == 3
        assert config.inner_gap == 8
        assert config.smart_gaps is True

    def test_from_json_not_a_dict(self):
        """Test non-dict documents give the defaults."""
        assert AutotileConfig.from_json(["nope"]) == AutotileConfig()

    def test_parse_insert_position(self):
        """Test string values map to positions, unknown ones to END."""
        assert parse_insert_position("afterFocused") is InsertPosition.AFTER_FOCUSED
        assert parse_insert_position(InsertPosition.AS_MASTER) is InsertPosition.AS_MASTER
        assert parse_insert_position("bogus") is InsertPosition.END


@pytest.mark.unit
class TestSettings:
    """Test the settings snapshot and policy table."""

    def test_snapshot_to_config(self):
        """Test snapshots convert to clamped configs."""
        snapshot = SettingsSnapshot(
            autotile_screens=frozenset({"DP-1"}),
            algorithm_id="columns",
            master_count=9,
            inner_gap=4,
        )

        config = snapshot.to_config()

        assert config.algorithm_id == "columns"
        assert config.master_count == 5
        assert config.inner_gap == 4

    def test_every_config_field_has_a_policy(self):
        """Test each config field is covered by the policy table."""
        fields = set(AutotileConfig().__dataclass_fields__)

        assert fields == set(SETTING_POLICIES)

    def test_policies(self):
        """Test a few representative policies."""
        assert SETTING_POLICIES["algorithm_id"] is SettingPolicy.SET_ALGORITHM
        assert SETTING_POLICIES["split_ratio"] is SettingPolicy.PROPAGATE_AND_RETILE
        assert SETTING_POLICIES["inner_gap"] is SettingPolicy.RETILE
        assert SETTING_POLICIES["insert_position"] is SettingPolicy.CONFIG_ONLY
