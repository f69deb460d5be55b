# tests/integration/test_cli.py
import json

import pytest

import main as cli
from tests.utils import mortgage_payload_dict, write_json

pytestmark = pytest.mark.integration


@pytest.mark.parametrize("calculator", cli.CALCULATORS)
def test_sample_runs_succeed(calculator, capsys):
    assert cli.main([calculator]) == 0
    out = capsys.readouterr().out
    assert "tax year 2026" in out


def test_writes_result_json(tmp_path, capsys):
    out = tmp_path / "out" / "result.json"
    assert cli.main(["pension", "--out", str(out)]) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["calculator"] == "pension"
    assert data["pension"]["years_to_retire"] == 35


def test_config_file_run(tmp_path, capsys):
    cfg = write_json(tmp_path / "mortgage.json", mortgage_payload_dict(extra_monthly=500))
    assert cli.main(["--config", str(cfg)]) == 0
    assert "Early repayment" in capsys.readouterr().out


def test_grace_covering_term_exits_2(tmp_path, capsys):
    payload = mortgage_payload_dict()
    payload["scenario"]["tracks"][0]["grace_months"] = 300
    cfg = write_json(tmp_path / "bad.json", payload)
    assert cli.main(["--config", str(cfg)]) == 2
    assert "grace_months (300)" in capsys.readouterr().err


def test_missing_config_exits_2(tmp_path):
    assert cli.main(["--config", str(tmp_path / "missing.json")]) == 2


def test_calculator_required_without_config():
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_sample_payload_rejects_unknown_calculator():
    with pytest.raises(ValueError):
        cli.build_sample_payload("lottery")
