"""
Data Loading Tests
Tests for profile exports, question banks and signal rule files
"""

import json

import pytest
import yaml

from mindset.data_loading import (
    candidates_from_frame,
    load_profiles,
    load_question_bank,
    load_signal_rules,
)
from mindset.errors import InvalidQuestionBank, InvalidSignalRule
from mindset.traits import TRAIT_DIMENSIONS, derive_from_answers


def _traits(value):
    return {dim: value for dim in TRAIT_DIMENSIONS}


class TestLoadProfiles:
    """Test profile export loading"""

    def test_csv_with_traits_column(self, tmp_path):
        """Test a CSV holding the stored traits as JSON"""
        path = tmp_path / "profiles.csv"
        path.write_text(
            "id,name,username,mindset_traits,joined_communities\n"
            f"001,Ada,ada,\"{json.dumps(_traits(60)).replace(chr(34), chr(34) * 2)}\",c1;c2\n"
            "002,Bob,bob,,\n"
        )
        df = load_profiles(str(path))
        assert df["id"].tolist() == ["001", "002"]

        candidates = candidates_from_frame(df)
        assert candidates[0].traits == _traits(60)
        assert candidates[0].joined_communities == ["c1", "c2"]
        assert candidates[1].traits is None
        assert candidates[1].joined_communities == []

    def test_csv_with_dimension_columns(self, tmp_path):
        """Test a CSV with one column per trait dimension"""
        path = tmp_path / "profiles.csv"
        header = "id,name," + ",".join(TRAIT_DIMENSIONS)
        path.write_text(
            header + "\n"
            "u1,Ada,80,20,50,70,30,60\n"
            "u2,Bob,55,,55,55,55,55\n"
        )
        candidates = candidates_from_frame(load_profiles(str(path)))
        assert candidates[0].traits == {
            "analytical": 80, "creative": 20, "emotional": 50,
            "logical": 70, "risk_taking": 30, "collaborative": 60,
        }
        assert candidates[1].traits == {
            "analytical": 55, "emotional": 55, "logical": 55,
            "risk_taking": 55, "collaborative": 55,
        }
        assert candidates[0].username is None

    def test_json_export(self, tmp_path):
        """Test a JSON list of profile records"""
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps([
            {"id": "u1", "name": "Ada", "mindset_traits": _traits(70), "joined_communities": ["c1"]},
            {"id": "u2", "name": "Bob", "mindset_traits": None},
        ]))
        candidates = candidates_from_frame(load_profiles(str(path)))
        assert candidates[0].traits == _traits(70)
        assert candidates[0].joined_communities == ["c1"]
        assert candidates[1].traits is None

    def test_missing_file(self, tmp_path):
        """Test a missing export raises"""
        with pytest.raises(FileNotFoundError):
            load_profiles(str(tmp_path / "nope.csv"))

    def test_missing_traits_columns(self, tmp_path):
        """Test an export without any trait data is rejected"""
        path = tmp_path / "profiles.csv"
        path.write_text("id,name\nu1,Ada\n")
        with pytest.raises(ValueError, match="mindset_traits"):
            load_profiles(str(path))

    def test_empty_json(self, tmp_path):
        """Test an empty export is rejected"""
        path = tmp_path / "profiles.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            load_profiles(str(path))


class TestLoadQuestionBank:
    """Test YAML question banks"""

    def test_load(self, tmp_path):
        """Test loading a small bank and deriving from it"""
        path = tmp_path / "questions.yaml"
        path.write_text(yaml.safe_dump({"questions": [
            {"id": 1, "question": "Pick", "options": [
                {"text": "A", "traits": {"analytical": 10}},
                {"text": "B", "traits": {"creative": 10}},
            ]},
            {"id": 2, "question": "Again", "options": [
                {"text": "C", "traits": {"emotional": 5}},
            ]},
        ]}))
        bank = load_question_bank(str(path))
        assert len(bank) == 2
        traits = derive_from_answers([1, 0], bank)
        assert traits.creative == 60
        assert traits.emotional == 55

    def test_empty_bank(self, tmp_path):
        """Test a bank without questions is rejected"""
        path = tmp_path / "questions.yaml"
        path.write_text("questions: []\n")
        with pytest.raises(InvalidQuestionBank):
            load_question_bank(str(path))

    def test_duplicate_ids(self, tmp_path):
        """Test question ids must be unique"""
        entry = {"id": 1, "question": "Pick", "options": [{"text": "A", "traits": {"logical": 5}}]}
        path = tmp_path / "questions.yaml"
        path.write_text(yaml.safe_dump({"questions": [entry, entry]}))
        with pytest.raises(InvalidQuestionBank):
            load_question_bank(str(path))

    def test_option_without_traits(self, tmp_path):
        """Test options need text and traits"""
        path = tmp_path / "questions.yaml"
        path.write_text(yaml.safe_dump({"questions": [
            {"id": 1, "question": "Pick", "options": [{"text": "A"}]}
        ]}))
        with pytest.raises(InvalidQuestionBank):
            load_question_bank(str(path))


class TestLoadSignalRules:
    """Test YAML signal rule tables"""

    def test_load(self, tmp_path):
        """Test loading a rule table"""
        path = tmp_path / "rules.yaml"
        path.write_text(yaml.safe_dump({"rules": [
            {"name": "music", "pattern": "song|music", "traits": {"creative": 2}},
        ]}))
        rules = load_signal_rules(str(path))
        assert [r.name for r in rules] == ["music"]
        assert rules[0].matches("new MUSIC out")

    def test_delta_bound(self, tmp_path):
        """Test the delta bound applies to loaded rules"""
        path = tmp_path / "rules.yaml"
        path.write_text(yaml.safe_dump({"rules": [
            {"name": "music", "pattern": "music", "traits": {"creative": 4}},
        ]}))
        with pytest.raises(InvalidSignalRule):
            load_signal_rules(str(path), max_rule_delta=3)

    def test_missing_file(self, tmp_path):
        """Test a missing rules file raises"""
        with pytest.raises(FileNotFoundError):
            load_signal_rules(str(tmp_path / "rules.yaml"))
