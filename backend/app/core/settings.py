import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    def __init__(self):
        self.app_name = "Invoice Dashboard"
        self.api_version = "1.0.0"
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.mongodb_uri = os.getenv("MONGODB_URI", "").strip() or None
        self.mongodb_db = os.getenv("MONGODB_DB", "nextjs-dashboard").strip()
        self.log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
