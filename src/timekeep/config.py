"""Timekeep configuration management."""

from __future__ import annotations

import os
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from timekeep.client.drafts import DRAFT_EXPIRY_MS, DRAFT_SAVE_DEBOUNCE_MS, DraftAutoSaver, DraftStore
from timekeep.client.polling import POLLING_INTERVAL_MS, PollingSession
from timekeep.client.scheduler import Scheduler
from timekeep.client.visibility import VisibilitySignal
from timekeep.core.entry_rules import EDIT_WINDOW_DAYS
from timekeep.core.time_indicator import AFTER_HOURS_CUTOFF

DEV_JWT_SECRET = "dev-secret-key-do-not-use"

# Keys written by save(); the JWT secret is only read from env.
_PERSISTED = (
    "log_level",
    "edit_window_days",
    "polling_interval_ms",
    "draft_expiry_ms",
    "draft_save_debounce_ms",
    "allow_unknown_routes",
    "after_hours_cutoff",
    "token_exp_minutes",
)


@dataclass
class Config:
    """Timekeep configuration."""

    data_path: Path = field(default_factory=lambda: Path.home() / ".timekeep")
    log_level: str = "INFO"

    # Entry rules
    edit_window_days: int = EDIT_WINDOW_DAYS

    # Client refresh and drafts
    polling_interval_ms: int = POLLING_INTERVAL_MS
    draft_expiry_ms: int = DRAFT_EXPIRY_MS
    draft_save_debounce_ms: int = DRAFT_SAVE_DEBOUNCE_MS

    # Access control
    allow_unknown_routes: bool = False
    after_hours_cutoff: int = AFTER_HOURS_CUTOFF

    # Sessions
    jwt_secret: str = DEV_JWT_SECRET
    token_exp_minutes: int = 60

    @classmethod
    def load(cls, data_path: Path | None = None) -> Config:
        """Load config from defaults, env vars, then the YAML file."""
        config = cls()

        if data_path:
            config.data_path = data_path

        env_path = os.environ.get("TIMEKEEP_HOME")
        if env_path:
            config.data_path = Path(env_path)

        env_log = os.environ.get("TIMEKEEP_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        env_secret = os.environ.get("TIMEKEEP_JWT_SECRET")
        if env_secret:
            config.jwt_secret = env_secret

        if config.config_file.exists():
            with open(config.config_file) as f:
                data = yaml.safe_load(f) or {}
            for key, value in data.items():
                if key in _PERSISTED:
                    expected_type = type(getattr(config, key))
                    setattr(config, key, expected_type(value))

        return config

    @property
    def config_file(self) -> Path:
        return self.data_path / "config.yaml"

    @property
    def db_path(self) -> Path:
        return self.data_path / "timekeep.db"

    def save(self) -> None:
        """Save current config to YAML."""
        self.data_path.mkdir(parents=True, exist_ok=True)
        data = {key: getattr(self, key) for key in _PERSISTED}
        with open(self.config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def polling_session(
        self,
        on_poll: Callable[[], object],
        *,
        scheduler: Scheduler,
        visibility: VisibilitySignal,
    ) -> PollingSession:
        """Build a polling session using the configured interval."""
        return PollingSession(
            on_poll, self.polling_interval_ms, scheduler=scheduler, visibility=visibility
        )

    def draft_store(self, storage: MutableMapping[str, str]) -> DraftStore:
        return DraftStore(storage, expiry_ms=self.draft_expiry_ms)

    def draft_saver(
        self, storage: MutableMapping[str, str], key: str, *, scheduler: Scheduler
    ) -> DraftAutoSaver:
        return DraftAutoSaver(
            self.draft_store(storage), key, scheduler=scheduler, delay_ms=self.draft_save_debounce_ms
        )
