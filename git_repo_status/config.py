"""Settings read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import ConfigError
from .retry import DEFAULT_INTERVAL, DEFAULT_MAX_ATTEMPTS, RetryPolicy

ENV_PRUNE_ON_FETCH = "GIT_REPO_STATUS_PRUNE_ON_FETCH"
ENV_READ_ATTEMPTS = "GIT_REPO_STATUS_READ_ATTEMPTS"
ENV_RETRY_INTERVAL_MS = "GIT_REPO_STATUS_RETRY_INTERVAL_MS"
ENV_LOG_LEVEL = "GIT_REPO_STATUS_LOG_LEVEL"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    prune_on_fetch: bool = False
    read_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_interval: float = DEFAULT_INTERVAL
    log_level: int = logging.WARNING

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.read_attempts, interval=self.retry_interval)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    attempts = _get_int(env, ENV_READ_ATTEMPTS, DEFAULT_MAX_ATTEMPTS)
    if attempts < 1:
        raise ConfigError(f"{ENV_READ_ATTEMPTS} must be at least 1, got {attempts}.")
    interval_ms = _get_int(env, ENV_RETRY_INTERVAL_MS, int(DEFAULT_INTERVAL * 1000))
    if interval_ms < 0:
        raise ConfigError(f"{ENV_RETRY_INTERVAL_MS} cannot be negative, got {interval_ms}.")
    return Settings(
        prune_on_fetch=_get_bool(env, ENV_PRUNE_ON_FETCH, False),
        read_attempts=attempts,
        retry_interval=interval_ms / 1000,
        log_level=_get_log_level(env),
    )


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be one of 1/0, true/false, yes/no, on/off. Got: {raw}")


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer. Got: {raw}") from exc


def _get_log_level(env: Mapping[str, str]) -> int:
    raw = env.get(ENV_LOG_LEVEL, "").strip().upper()
    if not raw:
        return logging.WARNING
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ConfigError(f"{ENV_LOG_LEVEL} is not a logging level: {raw}")
    return level


__all__ = ["Settings", "load_settings"]
