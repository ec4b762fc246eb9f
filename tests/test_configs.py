"""
Configuration Tests
Tests for YAML config loading and validation
"""

import os

import pytest

from mindset.configs import get_config_value, load_config, validate_config
from mindset.evolution import SignalRuleConfig, DEFAULT_SIGNAL_RULES

from conftest import PROJECT_ROOT

SHIPPED_CONFIG = os.path.join(PROJECT_ROOT, "configs", "config.yaml")


class TestShippedConfig:
    """Test the configuration file shipped with the project"""

    def test_loads_without_issues(self):
        """Test the shipped config validates cleanly"""
        config = load_config(SHIPPED_CONFIG)
        assert validate_config(config) == []

    def test_rules_match_builtin_table(self):
        """Test the configured rules mirror the built-in ones"""
        config = load_config(SHIPPED_CONFIG)
        assert SignalRuleConfig.from_config(config).build_rules() == DEFAULT_SIGNAL_RULES


class TestLoadConfig:
    """Test config file loading"""

    def test_missing_file(self, tmp_path):
        """Test a missing config raises"""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "config.yaml"))

    def test_empty_file(self, tmp_path):
        """Test an empty config raises"""
        path = tmp_path / "config.yaml"
        path.write_text("")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_non_mapping(self, tmp_path):
        """Test a config must be a mapping"""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(str(path))


class TestValidateConfig:
    """Test config validation messages"""

    def test_empty_config_is_valid(self):
        """Test that every section is optional"""
        assert validate_config({}) == []

    def test_unknown_section(self):
        """Test unknown sections are reported"""
        issues = validate_config({"modeling": {}})
        assert any("modeling" in issue for issue in issues)

    def test_bad_max_rule_delta(self):
        """Test max_rule_delta must be a positive integer"""
        issues = validate_config({"evolution": {"max_rule_delta": 0}})
        assert any("max_rule_delta" in issue for issue in issues)

    def test_rule_delta_over_bound(self):
        """Test rule deltas are checked against max_rule_delta"""
        config = {"evolution": {
            "max_rule_delta": 2,
            "rules": [{"name": "r", "pattern": "x", "traits": {"creative": 3}}],
        }}
        issues = validate_config(config)
        assert any("exceeds max_rule_delta" in issue for issue in issues)

    def test_rule_missing_fields_and_bad_dimension(self):
        """Test rule entries are checked for fields and dimensions"""
        config = {"evolution": {"rules": [{"name": "r", "traits": {"openness": 1}}]}}
        issues = validate_config(config)
        assert any("missing pattern" in issue for issue in issues)
        assert any("openness" in issue for issue in issues)

    def test_bad_ranking(self):
        """Test ranking values are checked"""
        issues = validate_config({"ranking": {"default_limit": -1, "exclude_states": ["blocked"]}})
        assert len(issues) == 2

    def test_missing_question_bank(self, tmp_path):
        """Test a configured question bank must exist"""
        config = {"questionnaire": {"question_bank": str(tmp_path / "missing.yaml")}}
        assert len(validate_config(config)) == 1

    def test_bad_evaluation(self):
        """Test evaluation values are checked"""
        config = {"evaluation": {"quantiles": [0.5, 1.5], "audit_pairs": 0}}
        assert len(validate_config(config)) == 2

    def test_non_numeric_evaluation_values_are_reported(self):
        """Test wrongly typed evaluation values become issues"""
        issues = validate_config({"evaluation": {"quantiles": ["p50", None], "audit_pairs": "many"}})
        assert len(issues) == 3
        issues = validate_config({"evaluation": {"quantiles": 0.5}})
        assert issues == ["evaluation.quantiles must be a list, got 0.5"]

    def test_rule_traits_not_a_mapping(self):
        """Test a rule whose traits are a list is reported"""
        config = {"evolution": {"rules": [{"name": "r", "pattern": "x", "traits": ["analytical"]}]}}
        issues = validate_config(config)
        assert len(issues) == 1
        assert "traits must be a mapping" in issues[0]

    def test_non_integer_rule_delta(self):
        """Test a non-integer delta is reported"""
        config = {"evolution": {"rules": [{"name": "r", "pattern": "x", "traits": {"creative": "2"}}]}}
        assert any("must be an integer" in issue for issue in validate_config(config))

    def test_section_not_a_mapping(self):
        """Test sections holding scalars are reported"""
        issues = validate_config({"evolution": 5, "ranking": ["connected"]})
        assert len(issues) == 2

    def test_bad_exclude_states_type(self):
        """Test exclude_states must be a list"""
        issues = validate_config({"ranking": {"exclude_states": "connected"}})
        assert len(issues) == 1


class TestGetConfigValue:
    """Test dotted config lookup"""

    def test_nested_value(self):
        """Test reading a nested value"""
        assert get_config_value({"ranking": {"default_limit": 5}}, "ranking.default_limit") == 5

    def test_default(self):
        """Test missing paths return the default"""
        assert get_config_value({}, "ranking.default_limit", 10) == 10
