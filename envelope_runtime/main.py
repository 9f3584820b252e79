from __future__ import annotations

import argparse
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from envelope.decoder import decode
from envelope.types import Envelope
from envelope_runtime.audit import AuditLogger
from envelope_runtime.client import EnvelopeClient, build_fetcher
from envelope_runtime.config import Settings, settings as default_settings
from envelope_runtime.metrics import MetricsCollector, metrics as default_metrics
from envelope_runtime.scenarios import DemoCall, load_calls
from transport.http import TransportError


def describe(call: DemoCall, envelope: Envelope[Any]) -> str:
    if envelope.is_error:
        return f"ERROR! {envelope.error_message}"
    value = envelope.data
    if call.field and value is not None:
        value = getattr(value, call.field, None)
    return f"The response is OK. {call.label} is {value}"


def run_call(client: EnvelopeClient, base_url: str, call: DemoCall) -> str:
    try:
        if call.body is not None:
            envelope = decode(call.body, call.payload_type)
        else:
            envelope = client.get_data(base_url.rstrip("/") + call.path, call.payload_type)
    except (TransportError, ValidationError) as exc:
        return f"FAILED! {exc}"
    return describe(call, envelope)


def run_demo(
    calls: List[DemoCall],
    cfg: Settings,
    metrics: MetricsCollector,
    audit: Optional[AuditLogger] = None,
) -> List[str]:
    audit = audit or AuditLogger(cfg.audit_log_path)
    lines: List[str] = []
    with build_fetcher(cfg) as fetcher:
        client = EnvelopeClient(http=fetcher, audit=audit, metrics=metrics)
        for call in calls:
            print(f"\n{call.title}")
            line = run_call(client, cfg.base_url, call)
            print(line)
            lines.append(line)
    return lines


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Fetch typed envelopes from the mock API.")
    ap.add_argument("--scenarios", default=default_settings.scenarios_path)
    ap.add_argument("--metrics", action="store_true", help="print counters after the run")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if default_settings.http_adapter.lower() == "mock":
        print("Setting up a mock web server...")
    run_demo(load_calls(args.scenarios), default_settings, default_metrics)

    if args.metrics and default_settings.metrics_enabled:
        print()
        print(default_metrics.render_prometheus(), end="")


if __name__ == "__main__":
    main()
