from functools import lru_cache
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings

HYPERBEAM_API_BASE = "https://engine.hyperbeam.com/v0"

# Placeholder shipped in deploy templates; treated the same as a missing key.
NULL_API_KEY = "NULL-KEY"


class SessionTimeouts(BaseModel):
    """Per-session thresholds in seconds, enforced by Hyperbeam."""

    model_config = {"frozen": True}

    absolute: int = 900
    inactive: int = 120
    offline: int = 5
    warning: int = 60


class VMDefaults(BaseModel):
    """Compiled-in tunables applied to every VM this gateway creates."""

    model_config = {"frozen": True}

    max_vms: int = 10
    start_url: str = "https://jmw-v7.pages.dev/vm-homepage.html"
    timeout: SessionTimeouts = SessionTimeouts()
    webgl: bool = True
    dark: bool = True
    tag_prefix: str = "zena-vm"
    mobile: bool = True
    search_engine: str = "google"
    quality: str = "smooth"


class Settings(BaseSettings):
    # Hyperbeam
    hb_api_key: str | None = None

    # "passthrough" relays the upstream VM payload from /start-vm as-is.
    # "viewer" narrows it to {session_id, session_url} and serves /session/{id}.
    deployment_variant: Literal["passthrough", "viewer"] = "passthrough"

    # Server
    environment: str = "production"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore", "frozen": True}

    @property
    def api_key_configured(self) -> bool:
        key = (self.hb_api_key or "").strip()
        return bool(key) and key != NULL_API_KEY


@lru_cache
def get_settings() -> Settings:
    return Settings()
