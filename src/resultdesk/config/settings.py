from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    snapshot_path: str = os.getenv("RESULTDESK_SNAPSHOT_PATH", "data/snapshot.json")
    admin_api_key: str = os.getenv("RESULTDESK_ADMIN_API_KEY", "")

    default_full_marks: int = _int_env("RESULTDESK_DEFAULT_FULL_MARKS", 100)
    marksheet_scale: str = os.getenv("RESULTDESK_MARKSHEET_SCALE", "nine_point")
    admin_scale: str = os.getenv("RESULTDESK_ADMIN_SCALE", "nine_point")
    public_scale: str = os.getenv("RESULTDESK_PUBLIC_SCALE", "letter")

    log_level: str = os.getenv("RESULTDESK_LOG_LEVEL", "INFO")

    cors_allowed_origins: tuple[str, ...] = _split_csv(
        os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )


settings = Settings()
