from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required by the nudge functions (bypasses RLS)

    # Groups / feelings
    max_group_members: int = 6
    feeling_edit_window_minutes: int = 10
    ring_stale_hours: int = 24
    latest_feeling_lookback_days: int = 90  # ring and "latest" ignore older feelings

    # Invites
    invite_code_length: int = 8
    invite_ttl_days: int = 7
    invite_base_url: str = "https://colors.app/join"

    # Nudges (local wall-clock window, "HH:MM")
    nudge_window_start: str = "10:00"
    nudge_window_end: str = "20:00"
    default_timezone: str = "UTC"
    nudge_scheduler_enabled: bool = False
    nudge_scheduler_interval_seconds: int = 300

    # Expo push relay
    expo_push_url: str = "https://exp.host/--/api/v2/push/send"
    expo_access_token: Optional[str] = None
    push_timeout_seconds: float = 10.0
    push_batch_size: int = 100

    # Shared secret for the scheduled function endpoints
    cron_secret: Optional[str] = None

    # App
    app_name: str = "colors-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
