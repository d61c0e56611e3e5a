from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Role Permission Manager API"
    ENV: str = "development"
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # -------------------------------------------------
    # CORS (admin frontend origins)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (roles, permissions, role_permissions)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Role inheritance
    # -------------------------------------------------
    # JSON file mapping role name -> full (flattened) ancestor list.
    # When unset, core.role_inheritance.ROLE_INHERITANCE is used.
    ROLE_INHERITANCE_FILE: Optional[str] = Field(None, env="ROLE_INHERITANCE_FILE")

    # Roles whose permission set can be viewed but never saved
    READ_ONLY_ROLES: List[str] = ["executive"]

    # Display order for the role list; unknown roles sort last
    ROLE_DISPLAY_ORDER: List[str] = ["executive", "admin", "sales", "technician"]

    # -------------------------------------------------
    # Editor sessions
    # -------------------------------------------------
    EDITOR_SESSION_TTL_SECONDS: int = Field(
        1800,
        env="EDITOR_SESSION_TTL_SECONDS",
        description="How long an unsaved editor session is kept in memory (default: 30 minutes)",
    )

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()
