from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except Exception:
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except Exception:
        return default


def _port(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a port number, got {raw!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"{name} out of range: {port}")
    return port


def _base_url(name: str, default: str) -> str:
    raw = os.environ.get(name, "").strip() or default
    parts = urlsplit(raw)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigError(f"{name} must be an http(s) URL, got {raw!r}")
    return raw.rstrip("/")


def _mask(secret: str) -> str:
    return "(set)" if secret else "(unset)"


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    log_level = os.environ.get("LOG_LEVEL", "INFO")
    log_retention = _as_int(os.environ.get("LOG_RETENTION", "30"), 30)

    verbose = _as_bool(os.environ.get("HEALTHPROBE_VERBOSE", "0"))
    quiet = _as_bool(os.environ.get("HEALTHPROBE_QUIET", "0"))

    return LoggingEnvironment(
        log_level=log_level,
        log_retention=log_retention,
        verbose=verbose,
        quiet=quiet,
    )


# ------------------------------------------------------------
# Full runtime environment (CHECK RUNS ONLY)
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        # ---- TARGET SERVICE ----
        self.api_url = _base_url("HEALTHPROBE_API_URL", "http://localhost:3000")
        self.page_host = os.environ.get("HEALTHPROBE_PAGE_HOST", "localhost").strip()
        if not self.page_host:
            raise ConfigError("HEALTHPROBE_PAGE_HOST must not be empty")
        self.secure_port = _port("HEALTHPROBE_SECURE_PORT", 443)
        self.insecure_port = _port("HEALTHPROBE_INSECURE_PORT", 80)
        self.verify_tls = _as_bool(os.environ.get("HEALTHPROBE_VERIFY_TLS", "0"))

        # ---- BEHAVIOR ----
        self.request_timeout = _as_float(os.environ.get("HEALTHPROBE_TIMEOUT", "30"), 30.0)
        self.command_timeout = _as_float(
            os.environ.get("HEALTHPROBE_COMMAND_TIMEOUT", "30"), 30.0
        )
        self.settle_seconds = _as_float(
            os.environ.get("HEALTHPROBE_SETTLE_SECONDS", "2"), 2.0
        )

        # ---- AUTHORITY ----
        self.authority_wallet = os.environ.get("HEALTHPROBE_AUTHORITY_WALLET", "")
        self.authority_passphrase = os.environ.get(
            "HEALTHPROBE_AUTHORITY_PASSPHRASE", ""
        )

        # ---- RUN CONTEXT ----
        self.command = os.environ.get("HEALTHPROBE_COMMAND", "bootstrap")
        self.suite = os.environ.get("HEALTHPROBE_SUITE")

    @property
    def secure_page_url(self) -> str:
        if self.secure_port == 443:
            return f"https://{self.page_host}"
        return f"https://{self.page_host}:{self.secure_port}"

    @property
    def insecure_page_url(self) -> str:
        if self.insecure_port == 80:
            return f"http://{self.page_host}"
        return f"http://{self.page_host}:{self.insecure_port}"

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Target": {
                "api_url": self.api_url,
                "secure_page_url": self.secure_page_url,
                "insecure_page_url": self.insecure_page_url,
                "verify_tls": self.verify_tls,
            },
            "Behavior": {
                "command": self.command,
                "suite": self.suite,
                "request_timeout": self.request_timeout,
                "command_timeout": self.command_timeout,
                "settle_seconds": self.settle_seconds,
            },
            "Authority": {
                "wallet": self.authority_wallet or "(unset)",
                "passphrase": _mask(self.authority_passphrase),
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
