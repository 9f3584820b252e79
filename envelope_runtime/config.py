from __future__ import annotations

from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()


class Settings(BaseModel):
    base_url: str = os.getenv("BASE_URL", "http://contoso.come")
    http_adapter: str = os.getenv("HTTP_ADAPTER", "mock")
    http_timeout_ms: int = int(os.getenv("HTTP_TIMEOUT_MS", "5000"))
    audit_log_path: str = os.getenv("AUDIT_LOG_PATH", "results/audit.jsonl")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    metrics_enabled: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"
    scenarios_path: str = os.getenv("SCENARIOS_PATH", "")


settings = Settings()
