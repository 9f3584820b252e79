from __future__ import annotations

import json
from pathlib import Path

import pytest

from envelope.types import Customer, Supplier
from envelope_runtime.audit import AuditLogger
from envelope_runtime.config import Settings
from envelope_runtime.main import main, run_demo
from envelope_runtime.metrics import MetricsCollector
from envelope_runtime.scenarios import DEFAULT_SCENARIOS_PATH, DemoCall, load_calls, parse_calls


@pytest.fixture
def cfg(tmp_path: Path) -> Settings:
    return Settings(
        base_url="http://contoso.come",
        http_adapter="mock",
        audit_log_path=str(tmp_path / "audit.jsonl"),
    )


def test_demo_scenarios_load_in_order() -> None:
    calls = load_calls()
    assert [c.path for c in calls] == ["/customer/157", "/customers", "/supplier/1885", "/version/", "/customer/76", None]
    assert calls[2].payload_type is Supplier
    assert calls[3].payload_type is str
    assert calls[5].body is not None


def test_full_demo_run(cfg: Settings, capsys: pytest.CaptureFixture[str]) -> None:
    metrics = MetricsCollector()
    lines = run_demo(load_calls(), cfg, metrics)

    assert lines == [
        "The response is OK. Customer name is Mike Ross",
        "ERROR! An error occurred. Error code 99 - Error data type",
        "The response is OK. Supplier company is Microsoft",
        "The response is OK. The version is v 2.15.144",
        "The response is OK. Supplier company is None",
        "The response is OK. Customer name is John Ross",
    ]
    out = capsys.readouterr().out
    assert "Getting customer data with error..." in out

    # the local parse is not fetched, so only five calls are audited
    events = Path(cfg.audit_log_path).read_text(encoding="utf-8").strip().splitlines()
    assert len(events) == 5
    assert metrics.count("data") == 4
    assert metrics.count("error") == 1


def test_failures_are_local_to_the_call(cfg: Settings, tmp_path: Path) -> None:
    calls = [
        DemoCall(title="missing", payload_type=Customer, label="Customer name", field="name", path="/nowhere"),
        DemoCall(title="garbage", payload_type=Customer, label="Customer name", field="name", body="not json"),
        DemoCall(title="ok", payload_type=Customer, label="Customer name", field="name", path="/customer/1"),
    ]
    metrics = MetricsCollector()
    lines = run_demo(calls, cfg, metrics, audit=AuditLogger(str(tmp_path / "other.jsonl")))

    assert lines[0] == "FAILED! The request is failed with error 404"
    assert lines[1].startswith("FAILED! ")
    assert lines[2] == "The response is OK. Customer name is Mike Ross"
    assert metrics.count("transport_failed") == 1

    events = [json.loads(l) for l in (tmp_path / "other.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [e["outcome"] for e in events] == ["transport_failed", "data"]


def test_parse_calls_rejects_unknown_payload() -> None:
    with pytest.raises(ValueError):
        parse_calls({"calls": [{"title": "x", "path": "/a", "payload": "invoice"}]})


def test_parse_calls_requires_path_or_body() -> None:
    with pytest.raises(ValueError):
        parse_calls({"calls": [{"title": "x", "payload": "customer"}]})


def test_main_prints_metrics(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    from envelope_runtime import main as main_mod

    monkeypatch.setattr(main_mod, "default_settings", Settings(http_adapter="mock", audit_log_path=str(tmp_path / "a.jsonl"), scenarios_path=""))
    monkeypatch.setattr(main_mod, "default_metrics", MetricsCollector())
    main(["--metrics"])

    out = capsys.readouterr().out
    assert out.startswith("Setting up a mock web server...")
    assert "The response is OK. The version is v 2.15.144" in out
    assert 'envelope_fetch_total{outcome="data"} 4' in out


def test_default_scenarios_load_outside_the_checkout(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    assert DEFAULT_SCENARIOS_PATH.name == "demo.yaml"
    assert DEFAULT_SCENARIOS_PATH.parent.name == "envelope_runtime"
    assert len(load_calls()) == 6
    assert len(load_calls("")) == 6


def test_load_calls_reads_an_explicit_file(tmp_path: Path) -> None:
    path = tmp_path / "one.yaml"
    path.write_text("calls:\n  - title: v\n    path: /version/\n    payload: string\n    label: The version\n", encoding="utf-8")
    calls = load_calls(str(path))
    assert [c.path for c in calls] == ["/version/"]


@pytest.mark.parametrize(
    "item",
    [
        {"title": "x", "path": "/customer/1", "payload": "customer", "field": "customerId"},
        {"title": "x", "path": "/customer/1", "payload": "customer", "field": "nmae"},
        {"title": "x", "path": "/version/", "payload": "string", "field": "name"},
    ],
)
def test_parse_calls_rejects_unknown_field(item: dict) -> None:
    with pytest.raises(ValueError):
        parse_calls({"calls": [item]})


def test_parse_calls_accepts_model_attribute_names() -> None:
    calls = parse_calls({"calls": [{"title": "x", "path": "/customer/1", "payload": "customer", "field": "customer_id"}]})
    assert calls[0].field == "customer_id"
