"""Process configuration from the environment (and an optional .env file)."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

from mimic.markov import DEFAULT_MAX_LINE_TOKENS
from mimic.slack import DEFAULT_API_URL

ROOT = Path(__file__).parent.parent
DEFAULT_DATA_DIR = ROOT / "data"


class Settings(BaseModel):
    data_dir: Path = DEFAULT_DATA_DIR
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    slack_bot_user_id: str = ""
    slack_api_url: str = DEFAULT_API_URL
    max_line_tokens: int = DEFAULT_MAX_LINE_TOKENS
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Path | None = ROOT / ".env") -> "Settings":
        if env_file is not None:
            load_dotenv(env_file)
        return cls(
            data_dir=Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR))),
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN", ""),
            slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
            slack_bot_user_id=os.getenv("SLACK_BOT_USER_ID", ""),
            slack_api_url=os.getenv("SLACK_API_URL", DEFAULT_API_URL),
            max_line_tokens=int(os.getenv("MAX_LINE_TOKENS", str(DEFAULT_MAX_LINE_TOKENS))),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
