import os
from dotenv import load_dotenv

load_dotenv()

def _int_env(name: str, default: int = 0) -> int:
    value = os.getenv(name, '').strip()
    return int(value) if value else default

class Config:
    """Bot configuration settings, read once from the environment"""

    # Discord
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    DISCORD_GUILD_ID = _int_env('DISCORD_GUILD_ID')
    DISCORD_GUILD_IDS = os.getenv('DISCORD_GUILD_IDS', '')  # comma-separated, wins over DISCORD_GUILD_ID
    OWNER_DISCORD_ID = _int_env('OWNER_DISCORD_ID')
    SCORES_CHANNEL_ID = _int_env('SCORES_CHANNEL_ID')
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')

    # Logging
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')  # empty disables file logging

    # Storage
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'sql').strip().lower()  # "sql" or "redis"
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///coffee_golf.db')
    REDIS_URL = os.getenv('REDIS_URL')
    DOCUMENT_KEY = os.getenv('DOCUMENT_KEY', 'coffee-golf:scores')
    CACHE_TTL_SECONDS = _int_env('CACHE_TTL_SECONDS', 300)

    # Scoring
    MAX_DAILY_ATTEMPTS = _int_env('MAX_DAILY_ATTEMPTS', 3)
    TIMEZONE = os.getenv('TIMEZONE', 'America/New_York')

    # HTTP debug server, off when the port is 0
    HTTP_HOST = os.getenv('HTTP_HOST', '0.0.0.0')
    HTTP_PORT = _int_env('HTTP_PORT', _int_env('PORT'))

    @classmethod
    def get_guild_ids(cls):
        """Guilds to sync slash commands to; an empty list means a global sync"""
        raw_ids = [part.strip() for part in cls.DISCORD_GUILD_IDS.split(',') if part.strip()]
        if not raw_ids:
            return [cls.DISCORD_GUILD_ID] if cls.DISCORD_GUILD_ID else []
        try:
            return [int(guild_id) for guild_id in raw_ids]
        except ValueError:
            raise ValueError(f"DISCORD_GUILD_IDS must be comma-separated integers, got '{cls.DISCORD_GUILD_IDS}'")

    @classmethod
    def validate(cls):
        """Raise ValueError naming the first missing or invalid setting"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.SCORES_CHANNEL_ID:
            raise ValueError("SCORES_CHANNEL_ID is required")
        if cls.STORAGE_BACKEND not in ('sql', 'redis'):
            raise ValueError(f"STORAGE_BACKEND must be 'sql' or 'redis', got '{cls.STORAGE_BACKEND}'")
        if cls.MAX_DAILY_ATTEMPTS < 1:
            raise ValueError("MAX_DAILY_ATTEMPTS must be at least 1")
        cls.get_guild_ids()
