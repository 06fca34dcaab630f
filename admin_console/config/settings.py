from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Admin writes (payment approval, admin flag) bypass RLS

    # Tables
    profiles_table: str = "profiles"
    customers_table: str = "crm_customers"
    deals_table: str = "crm_deals"

    # Default admin shortcut (developer quick access on the login screen)
    default_admin_email: str = "admin@admin.com"
    default_admin_password: str = "admin123"

    # Console
    notification_buffer_size: int = 50  # most recent notifications kept per session

    # App
    app_name: str = "admin-console"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
