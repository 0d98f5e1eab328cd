# pr_stats/config.py
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_PORT = 3001
DEFAULT_MAX_CONCURRENCY = 10


@dataclass(frozen=True)
class Settings:
    github_token: Optional[str]
    repo_owner: str
    repo_name: str
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from the process environment (call load_dotenv first if a .env should apply).
        Owner and repo name fall back to empty strings; they are not validated here.
        """
        return cls(
            github_token=os.environ.get("GITHUB_PERSONAL_ACCESS_TOKEN") or None,
            repo_owner=os.environ.get("GITHUB_REPO_OWNER", ""),
            repo_name=os.environ.get("GITHUB_REPO_NAME", ""),
            max_concurrency=max(1, int(os.environ.get("GITHUB_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY))),
            host=os.environ.get("PR_STATS_HOST", "0.0.0.0"),
            port=int(os.environ.get("PR_STATS_PORT", DEFAULT_PORT)),
            log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper(),
        )
