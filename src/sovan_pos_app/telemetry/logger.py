from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path

from platformdirs import user_log_dir

from .events import PosEvent

logger = logging.getLogger(__name__)


def default_log_file(app_name: str) -> Path:
    return Path(user_log_dir("sovan-pos", "Sovan")) / f"{app_name}.jsonl"


class TelemetryLogger:
    """Appends POS events as JSON lines, one file per app, tagged with a run id."""

    def __init__(
        self,
        *,
        app_name: str,
        enabled: bool | None = None,
        log_file: str | Path | None = None,
        run_id: str | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = enabled if enabled is not None else _env_telemetry_enabled()
        self.log_file = Path(log_file) if log_file else default_log_file(app_name)
        self.run_id = run_id or uuid.uuid4().hex

    def emit(self, event: PosEvent) -> bool:
        if not self.enabled:
            return False

        payload = event.to_dict()
        payload["app_name"] = self.app_name
        payload["run_id"] = self.run_id
        line = json.dumps(payload, sort_keys=True)

        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with self.log_file.open("a", encoding="utf-8") as fp:
            fp.write(f"{line}\n")
        logger.debug("telemetry_event", extra={"event_name": event.name, "category": event.category})
        return True


def _env_telemetry_enabled() -> bool:
    value = os.getenv("SOVAN_TELEMETRY_ENABLED", "0").strip().lower()
    return value in {"1", "true", "yes", "on"}
