import os

from dotenv import load_dotenv

load_dotenv()

SECRET_KEY = os.environ.get("SECRET_KEY", "tinyapp-dev-secret")
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite+aiosqlite://")

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
