"""
CLI Tests
Tests for the derive, evolve, rank and report commands
"""

import json
import os

import pytest

from mindset.run import main, build_parser
from mindset.traits import TRAIT_DIMENSIONS

from conftest import PROJECT_ROOT

CONFIG = os.path.join(PROJECT_ROOT, "configs", "config.yaml")


@pytest.fixture
def profiles_csv(tmp_path):
    path = tmp_path / "profiles.csv"
    rows = [
        ("u1", "Ada", 50, "c1"),
        ("u2", "Bob", 60, "c1"),
        ("u3", "Cy", 52, ""),
        ("u4", "Di", 90, "c1;c2"),
    ]
    lines = ["id,name,username,joined_communities," + ",".join(TRAIT_DIMENSIONS)]
    for user_id, name, score, communities in rows:
        lines.append(",".join([user_id, name, name.lower(), communities] + [str(score)] * 6))
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def _run(capsys, *argv):
    code = main(["--config", CONFIG] + list(argv))
    return code, capsys.readouterr().out


class TestDerive:
    """Test the derive command"""

    def test_derive(self, capsys):
        """Test deriving traits from a full answer sequence"""
        code, out = _run(capsys, "derive", "--answers", "0,0,0,0,0,0,0,0,0,0,0,0")
        assert code == 0
        result = json.loads(out)
        assert set(result["traits"]) == set(TRAIT_DIMENSIONS)
        assert result["traits"]["analytical"] == 100
        assert len(result["dominant_traits"]) == 2

    def test_derive_partial_flag(self, capsys):
        """Test partial answers with --allow-partial"""
        code, out = _run(capsys, "derive", "--answers", "1", "--allow-partial")
        assert code == 0
        assert json.loads(out)["traits"]["creative"] == 70

    def test_derive_partial_rejected(self, capsys):
        """Test partial answers fail without the flag"""
        code, out = _run(capsys, "derive", "--answers", "0,1")
        assert code == 1
        assert out == ""

    def test_derive_bad_index(self, capsys):
        """Test an out-of-range index fails"""
        code, _ = _run(capsys, "derive", "--answers", ",".join(["7"] * 12))
        assert code == 1


class TestEvolve:
    """Test the evolve command"""

    def test_evolve(self, capsys):
        """Test applying a message"""
        vector = json.dumps({dim: 50 for dim in TRAIT_DIMENSIONS})
        code, out = _run(capsys, "evolve", "--vector", vector, "--message", "Let's plan it step by step")
        assert code == 0
        result = json.loads(out)
        assert result["traits"]["logical"] == 52
        assert result["traits"]["analytical"] == 51
        assert result["fired_rules"] == ["logical_signals"]

    def test_evolve_malformed_vector(self, capsys):
        """Test a malformed stored vector fails"""
        code, _ = _run(capsys, "evolve", "--vector", '{"analytical": 50}', "--message", "data")
        assert code == 1

    def test_evolve_invalid_json(self, capsys):
        """Test a vector that is not JSON fails"""
        code, _ = _run(capsys, "evolve", "--vector", "not json", "--message", "data")
        assert code == 1


class TestRank:
    """Test the rank command"""

    def test_rank_json(self, capsys, profiles_csv):
        """Test ranking excludes the requester and sorts by score"""
        code, out = _run(capsys, "rank", "--profiles", profiles_csv, "--user-id", "u1")
        assert code == 0
        matches = json.loads(out)
        assert [m["id"] for m in matches] == ["u3", "u2", "u4"]
        assert [m["similarity"] for m in matches] == [98, 90, 60]

    def test_rank_limit_and_exclude(self, capsys, profiles_csv):
        """Test --limit and --exclude"""
        code, out = _run(capsys, "rank", "--profiles", profiles_csv, "--user-id", "u1",
                         "--exclude", "u3", "--limit", "1")
        assert code == 0
        assert [m["id"] for m in json.loads(out)] == ["u2"]

    def test_rank_connections(self, capsys, profiles_csv, tmp_path):
        """Test connected and pending users are left out"""
        connections = tmp_path / "connections.json"
        connections.write_text(json.dumps({"u2": "connected", "u3": "pending_received", "u4": "none"}))
        code, out = _run(capsys, "rank", "--profiles", profiles_csv, "--user-id", "u1",
                         "--connections", str(connections))
        assert code == 0
        assert [m["id"] for m in json.loads(out)] == ["u4"]

    def test_rank_community(self, capsys, profiles_csv):
        """Test --community"""
        code, out = _run(capsys, "rank", "--profiles", profiles_csv, "--user-id", "u1",
                         "--community", "c1")
        assert code == 0
        assert [m["id"] for m in json.loads(out)] == ["u2", "u4"]

    def test_rank_table(self, capsys, profiles_csv):
        """Test table output"""
        code, out = _run(capsys, "rank", "--profiles", profiles_csv, "--user-id", "u1",
                         "--format", "table")
        assert code == 0
        assert "similarity" in out
        assert "u3" in out

    def test_rank_unknown_user(self, capsys, profiles_csv):
        """Test an unknown requester fails"""
        code, _ = _run(capsys, "rank", "--profiles", profiles_csv, "--user-id", "nobody")
        assert code == 1


class TestReport:
    """Test the report command"""

    def test_report(self, capsys, profiles_csv, tmp_path):
        """Test report summary and JSON output"""
        output = tmp_path / "report.json"
        code, out = _run(capsys, "report", "--profiles", profiles_csv, "--output", str(output))
        assert code == 0
        assert "Evaluation Report: profiles" in out
        report = json.loads(output.read_text())
        assert report["n_profiles"] == 4
        assert report["n_pairs"] == 6


class TestParser:
    """Test argument parsing"""

    def test_command_required(self):
        """Test a subcommand must be given"""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_missing_explicit_config(self, capsys, tmp_path):
        """Test an explicitly given config must exist"""
        code = main(["--config", str(tmp_path / "missing.yaml"), "derive", "--answers", "0"])
        assert code == 1
