import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Database
    db_path: str = os.getenv("LIBRARY_DB_PATH", "library.db")
    db_timeout: float = float(os.getenv("LIBRARY_DB_TIMEOUT", "30"))

    # Seed account, created only when admin_table is empty
    default_admin_username: str = os.getenv("LIBRARY_DEFAULT_ADMIN", "admin")
    default_admin_password: str = os.getenv("LIBRARY_DEFAULT_ADMIN_PASSWORD", "admin123")

    # Logging
    log_file: str = os.getenv("LIBRARY_LOG_FILE", os.path.join("logs", "library_system.log"))
    log_level: str = os.getenv("LIBRARY_LOG_LEVEL", "INFO")
    log_to_console: bool = _env_flag("LIBRARY_LOG_CONSOLE", "True")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    app_author: str = os.getenv("APP_AUTHOR", "Library Admin")
    appearance_mode: str = os.getenv("LIBRARY_APPEARANCE", "light")
    color_theme: str = os.getenv("LIBRARY_COLOR_THEME", "blue")


settings = Settings()
