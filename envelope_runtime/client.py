from __future__ import annotations

import logging
import time
import uuid
from typing import Type, TypeVar
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError

from envelope.decoder import decode
from envelope.types import Envelope
from envelope_runtime.audit import AuditLogger
from envelope_runtime.config import Settings
from envelope_runtime.metrics import MetricsCollector
from transport.http import HttpAdapter, HttpFetcher, TransportError
from transport.mock_server import mock_client

T = TypeVar("T")

logger = logging.getLogger(__name__)


def build_fetcher(settings: Settings) -> HttpFetcher:
    if settings.http_adapter.lower() == "real":
        timeout = max(settings.http_timeout_ms / 1000.0, 0.1)
        return HttpFetcher(httpx.Client(base_url=settings.base_url, timeout=timeout, trust_env=False))
    if settings.http_adapter.lower() != "mock":
        raise ValueError(f"Unknown HTTP adapter: {settings.http_adapter}")
    return HttpFetcher(mock_client(settings.base_url))


class EnvelopeClient:
    """
    Fetch a URL and decode its body as Envelope[T].
    Every call is audited and counted, whether it succeeds or not; transport
    and decode failures are re-raised to the caller.
    """

    def __init__(self, http: HttpAdapter, audit: AuditLogger, metrics: MetricsCollector):
        self.http = http
        self.audit = audit
        self.metrics = metrics

    def get_data(self, url: str, payload_type: Type[T]) -> Envelope[T]:
        request_id = f"req-{uuid.uuid4().hex[:12]}"
        t0 = time.perf_counter()
        try:
            body = self.http.get(url)
        except TransportError:
            self._record(request_id, url, payload_type, "transport_failed", t0)
            raise

        try:
            envelope = decode(body, payload_type)
        except ValidationError:
            self._record(request_id, url, payload_type, "decode_failed", t0)
            raise

        self._record(request_id, url, payload_type, "error" if envelope.is_error else "data", t0)
        return envelope

    def _record(self, request_id: str, url: str, payload_type: type, outcome: str, t0: float) -> None:
        latency_ms = (time.perf_counter() - t0) * 1000.0
        path = urlsplit(url).path or "/"
        self.metrics.inc(outcome)
        self.metrics.observe_latency(path, latency_ms)
        self.audit.emit(
            {
                "request_id": request_id,
                "url": url,
                "payload_type": getattr(payload_type, "__name__", str(payload_type)),
                "outcome": outcome,
                "latency_ms": round(latency_ms, 3),
            }
        )
        logger.info("GET %s -> %s (%.1f ms)", url, outcome, latency_ms)
