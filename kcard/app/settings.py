"""Runtime settings for the card service, read once from ``KCARD_*`` variables."""

from __future__ import annotations

import os
from typing import Dict, Literal, Mapping, Optional

from pydantic import BaseModel, Field, model_validator

from kcard.adapters.http_client import DEFAULT_REQUEST_TIMEOUT_S

Profile = Literal["hourly", "frequent"]

PROFILE_INTERVALS_S: Dict[str, float] = {
    "hourly": 3600.0,
    "frequent": 600.0,
}

_ENV_FIELDS = {
    "KCARD_NODE_NAME": "node_name",
    "KCARD_NODE_URL": "node_url",
    "KCARD_PROFILE": "profile",
    "KCARD_REFRESH_INTERVAL_S": "refresh_interval_s",
    "KCARD_REQUEST_TIMEOUT_S": "request_timeout_s",
    "KCARD_HOST": "host",
    "KCARD_PORT": "port",
    "KCARD_BACKGROUND_PATH": "background_path",
    "KCARD_FONT_PATH": "font_path",
}


class KcardSettings(BaseModel):
    node_name: str = Field("our.os", min_length=1, description="Own node name")
    node_url: str = Field("http://127.0.0.1:8080", min_length=1, description="Base URL of sibling processes")
    profile: Profile = "hourly"
    refresh_interval_s: Optional[float] = Field(None, gt=0, description="Overrides the profile interval")
    request_timeout_s: float = Field(DEFAULT_REQUEST_TIMEOUT_S, gt=0)
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)
    background_path: Optional[str] = None
    font_path: Optional[str] = None

    @model_validator(mode="after")
    def _strip_node_name(self) -> "KcardSettings":
        self.node_name = self.node_name.strip()
        if not self.node_name:
            raise ValueError("node_name must not be blank")
        return self

    @property
    def interval_s(self) -> float:
        """Sleep between refresh cycles."""
        if self.refresh_interval_s is not None:
            return self.refresh_interval_s
        return PROFILE_INTERVALS_S[self.profile]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "KcardSettings":
        """Build settings from environment variables; unset or empty ones keep defaults."""
        env = os.environ if environ is None else environ
        values = {
            field_name: env[var].strip()
            for var, field_name in _ENV_FIELDS.items()
            if env.get(var, "").strip()
        }
        return cls(**values)


__all__ = ["KcardSettings", "PROFILE_INTERVALS_S"]
