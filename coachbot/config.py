from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_NOTIFICATION_DAYS = (7, 3, 1)

def _parse_days(raw: str) -> tuple[int, ...]:
    days = {int(x.strip()) for x in raw.split(",") if x.strip()}
    if not days or min(days) <= 0:
        return DEFAULT_NOTIFICATION_DAYS
    return tuple(sorted(days, reverse=True))

@dataclass(frozen=True)
class Settings:
    bot_token: str = os.getenv("BOT_TOKEN", "")
    # OWNER_NUMBER kept for .env files written for the WhatsApp version
    admin_id: str = os.getenv("ADMIN_ID", os.getenv("OWNER_NUMBER", ""))
    identity_suffix: str = os.getenv("IDENTITY_SUFFIX", "")

    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "500"))
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))

    users_file: str = os.getenv("USERS_FILE", "users.json")
    backup_dir: str = os.getenv("BACKUP_DIR", "session_backup")
    session_file: str = os.getenv("SESSION_FILE", ".session/session.json")
    backup_keep: int = int(os.getenv("BACKUP_KEEP", "24"))

    sweep_interval_hours: int = int(os.getenv("SWEEP_INTERVAL_HOURS", "6"))
    backup_interval_minutes: int = int(os.getenv("BACKUP_INTERVAL_MINUTES", "60"))
    expiry_notification_days: tuple[int, ...] = field(
        default_factory=lambda: _parse_days(os.getenv("EXPIRY_NOTIFICATION_DAYS", "7,3,1"))
    )
    default_grant_days: int = int(os.getenv("DEFAULT_GRANT_DAYS", "30"))

    tz: str = os.getenv("TZ", "UTC")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def admin_identity(self) -> str:
        return self.normalize_identity(self.admin_id) if self.admin_id else ""

    def normalize_identity(self, raw: str) -> str:
        raw = raw.strip()
        if self.identity_suffix and not raw.endswith(self.identity_suffix):
            return raw + self.identity_suffix
        return raw

settings = Settings()
