# config.py
import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/liftlog"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 🔐 JWT config
    JWT_TOKEN_LOCATION = ["headers"]     # where to look for tokens
    JWT_HEADER_NAME = "Authorization"    # header name
    JWT_HEADER_TYPE = "Bearer"           # expected prefix
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)  # dev: 7 days

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # 📈 Analytics: trailing window used when no period token is given
    ANALYTICS_DEFAULT_WINDOW_DAYS = int(os.environ.get("ANALYTICS_DEFAULT_WINDOW_DAYS", 30))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    LOG_LEVEL = "DEBUG"


# Categories shown first in the analytics overview, in this order.
DEFAULT_CATEGORIES = ["chest", "back", "legs", "shoulders", "arms", "core"]
UNCATEGORIZED = "uncategorized"
