from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OG_USER_AGENT = (
    "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"
)


class Settings(BaseSettings):
    content_dir: str = "src/content"
    output_dir: str = "dist"
    site_file_name: str = "site.json"

    og_timeout_seconds: float = 8.0
    og_user_agent: str = DEFAULT_OG_USER_AGENT
    http_concurrency: int = 8
    placeholder_image: str = ""

    allowed_hosts: list[str] = Field(
        default_factory=lambda: [".ngrok-free.dev", ".ngrok-free.app", ".ngrok.io"]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def is_host_allowed(self, host: str) -> bool:
        """Check a host against the dev preview allow-list.

        Suffix entries (leading dot) also accept the bare domain. Exposed for the
        dev preview server, which runs outside this package; the build pipeline
        does not call it.
        """
        host = host.lower().strip()
        for allowed in self.allowed_hosts:
            target = allowed.lower().strip()
            if not target:
                continue
            if target.startswith("."):
                if host.endswith(target) or host == target[1:]:
                    return True
            elif host == target:
                return True
        return False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
