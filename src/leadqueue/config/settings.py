"""Runtime settings.

Defaults come from core.constants. Environment variables override them,
and CLI options override the environment.

    LEADQUEUE_API_BASE_URL   Gateway base URL
    LEADQUEUE_STORAGE_DIR    Directory holding the offline queue slot
"""
import os
from dataclasses import dataclass, field
from pathlib import Path

from leadqueue.core.constants import API_BASE_URL, API_FORM_SUBMISSION_TIMEOUT_MS

ENV_API_BASE_URL = "LEADQUEUE_API_BASE_URL"
ENV_STORAGE_DIR = "LEADQUEUE_STORAGE_DIR"

DEFAULT_STORAGE_DIR = Path.home() / ".leadqueue"


@dataclass
class Settings:
    """Resolved settings for one process."""
    api_base_url: str = API_BASE_URL
    storage_dir: Path = field(default_factory=lambda: DEFAULT_STORAGE_DIR)
    timeout_ms: int = API_FORM_SUBMISSION_TIMEOUT_MS


def load_settings(
    api_base_url: str | None = None,
    storage_dir: str | Path | None = None,
    timeout_ms: int | None = None,
) -> Settings:
    """Resolve settings: explicit argument > environment > default."""
    base_url = api_base_url or os.environ.get(ENV_API_BASE_URL) or API_BASE_URL
    directory = storage_dir or os.environ.get(ENV_STORAGE_DIR) or DEFAULT_STORAGE_DIR

    return Settings(
        api_base_url=base_url.rstrip("/"),
        storage_dir=Path(directory).expanduser(),
        timeout_ms=timeout_ms or API_FORM_SUBMISSION_TIMEOUT_MS,
    )
