import os
from dotenv import load_dotenv

load_dotenv()


def _float(name, default):
    return float(os.getenv(name, default))


def _int(name, default):
    return int(os.getenv(name, default))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Courier history aggregation service
    COURIER_API_URL = os.getenv("COURIER_API_URL", "https://bdcourier.com")
    COURIER_API_KEY = os.getenv("COURIER_API_KEY", "")
    COURIER_TIMEOUT_SECONDS = _float("COURIER_TIMEOUT_SECONDS", 10)

    # Order placement service
    ORDER_API_URL = os.getenv("ORDER_API_URL", "")
    ORDER_API_KEY = os.getenv("ORDER_API_KEY", "")
    ORDER_TIMEOUT_SECONDS = _float("ORDER_TIMEOUT_SECONDS", 15)

    # Checkout drafts
    DRAFT_AUTOSAVE_SECONDS = _float("DRAFT_AUTOSAVE_SECONDS", 1.0)

    # Fraud-risk cut points (business heuristics, tunable)
    RISK_HIGH_CANCELLED = _int("RISK_HIGH_CANCELLED", 5)
    RISK_HIGH_RATIO = _float("RISK_HIGH_RATIO", 50)
    RISK_MEDIUM_CANCELLED = _int("RISK_MEDIUM_CANCELLED", 2)
    RISK_MEDIUM_RATIO = _float("RISK_MEDIUM_RATIO", 70)
    RISK_LOW_RATIO = _float("RISK_LOW_RATIO", 80)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///storefront-dev.db")


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-secret-key-for-testing-only"
    DRAFT_AUTOSAVE_SECONDS = 0.01


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
