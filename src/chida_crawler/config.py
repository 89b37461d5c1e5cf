"""Settings read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from chida_crawler.util import ConfigError

URL_VARS = ("NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_URL")
KEY_VAR = "SUPABASE_SERVICE_ROLE_KEY"


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    service_key: str


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read the store endpoint and service-role key.

    Raises ConfigError naming the first missing variable.
    """
    env = os.environ if environ is None else environ

    url = next((env[v].strip() for v in URL_VARS if env.get(v, "").strip()), "")
    if not url:
        raise ConfigError(f"Missing environment variable {URL_VARS[0]}")

    key = env.get(KEY_VAR, "").strip()
    if not key:
        raise ConfigError(f"Missing environment variable {KEY_VAR}")

    return Settings(supabase_url=url.rstrip("/"), service_key=key)
