import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or the project root
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY

    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', 12))

    CORS_ORIGINS = [
        o.strip()
        for o in os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080').split(',')
        if o.strip()
    ]

    # Load the demo users and bills into the in-memory store
    SEED_DEMO_DATA = _env_flag('SEED_DEMO_DATA', True)

    # {tier: (max_bills, max_participants)}; None means unlimited
    TIER_LIMITS = {
        "guest": (1, 2),
        "standard": (5, 3),
        "premium": (None, None),
    }


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = SECRET_KEY
    BCRYPT_LOG_ROUNDS = 4
    SEED_DEMO_DATA = True
