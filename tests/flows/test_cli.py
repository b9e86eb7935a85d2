# Unit tests for the `python -m flows` command line

import json

import pytest

import flows.__main__ as cli
from flows import FLOW_REGISTRY, FlowRegistry


@pytest.fixture
def cli_registry(monkeypatch, clean_runtime_env, make_llm):
    llm = make_llm({"rateNPR": "4500", "estimatedDeliveryTime": "5-7 business days"})
    registry = FlowRegistry(FLOW_REGISTRY.values(), llm)
    monkeypatch.setattr(cli, "get_flow_registry", lambda: registry)
    return llm


def test_list(cli_registry, capsys):
    assert cli.main(["list"]) == 0
    assert capsys.readouterr().out.split() == sorted(FLOW_REGISTRY)


def test_catalog(cli_registry, capsys):
    assert cli.main(["catalog"]) == 0
    catalog = json.loads(capsys.readouterr().out)
    assert [entry["name"] for entry in catalog] == sorted(FLOW_REGISTRY)


def test_run_prints_validated_output(cli_registry, capsys):
    code = cli.main(["run", "international_shipping", "--input", '{"destinationCountry": "USA"}'])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {
        "rateNPR": 4500,
        "estimatedDeliveryTime": "5-7 business days",
    }


def test_run_from_file_with_model_override(cli_registry, tmp_path, capsys):
    request = tmp_path / "request.json"
    request.write_text('{"destinationCountry": "Japan"}', encoding="utf-8")

    assert cli.main(["run", "international_shipping", "--input-file", str(request), "--model", "gpt-4.1"]) == 0
    assert cli_registry.model == "gpt-4.1"
    assert "to Japan." in cli_registry.calls[0]["prompt"]


def test_run_reports_classified_errors(cli_registry, capsys):
    code = cli.main(["run", "international_shipping", "--input", '{"destinationCountry": ""}'])

    assert code == 1
    err = capsys.readouterr().err
    error = json.loads(err[err.index('{\n  "error"'):])["error"]
    assert error["kind"] == "INVALID_INPUT"
    assert error["violations"][0]["path"] == "destinationCountry"


def test_run_unknown_flow_or_bad_json(cli_registry, capsys):
    assert cli.main(["run", "nope", "--input", "{}"]) == 2
    assert "Unknown flow: nope" in capsys.readouterr().err

    assert cli.main(["run", "ai_assistant", "--input", "{not json"]) == 2
    assert "Could not read request" in capsys.readouterr().err
