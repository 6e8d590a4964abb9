from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from urllib.parse import urlparse


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class AppSettings:
    base_url: str
    timeout_seconds: int
    token_store_path: str
    log_level: str

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("SHORTLINK_BASE_URL", "http://localhost:8080").strip().rstrip("/")

        raw_timeout = os.getenv("SHORTLINK_TIMEOUT_SECONDS", "30").strip()
        try:
            timeout_seconds = int(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"SHORTLINK_TIMEOUT_SECONDS must be an integer, got {raw_timeout!r}"
            ) from exc

        default_store_path = os.path.join(
            os.getenv("LOCALAPPDATA", os.getcwd()),
            "ShortlinkClient",
            "tokens.json",
        )
        token_store_path = os.getenv("SHORTLINK_TOKEN_STORE_PATH", default_store_path).strip()
        log_level = os.getenv("SHORTLINK_LOG_LEVEL", "INFO").strip().upper()

        settings = AppSettings(
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            token_store_path=token_store_path,
            log_level=log_level,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"SHORTLINK_BASE_URL must be an absolute http(s) URL, got {self.base_url!r}"
            )

        if self.timeout_seconds <= 0:
            raise ConfigurationError("SHORTLINK_TIMEOUT_SECONDS must be greater than 0")

        if not self.token_store_path:
            raise ConfigurationError("SHORTLINK_TOKEN_STORE_PATH must not be empty")

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(
                "SHORTLINK_LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv("SHORTLINK_ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / file_name)
    candidates.append(Path(__file__).resolve().parent.parent / file_name)

    unique_candidates: list[Path] = []
    seen: set[str] = set()
    for path in candidates:
        normalized = str(path.resolve()) if path.exists() else str(path)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique_candidates.append(path)
    return unique_candidates


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return
