from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = Field(
        default="",
        validation_alias=AliasChoices("supabase_key", "supabase_anon_key"),
    )  # Public/anon key, only used for password sign-in
    supabase_service_role_key: Optional[str] = None  # Required for every admin and token check call

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # App
    app_name: str = "supabase-admin-api"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "*"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def debug_enabled(self) -> bool:
        # Starlette's debug traceback page bypasses the catch-all error handler
        return self.debug and not self.is_production

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
