"""
Configuration for the invoice matching engine.
"""

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv()

import os
from typing import Tuple


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


class Config:
    """Base configuration."""

    # PO selection
    PO_MATCH_THRESHOLD: float = _env_float("PO_MATCH_THRESHOLD", 0.7)
    PO_HIGH_CONFIDENCE_THRESHOLD: float = _env_float("PO_HIGH_CONFIDENCE_THRESHOLD", 0.9)
    PO_WEIGHTS: Tuple[float, float, float] = (0.4, 0.3, 0.3)  # vendor, amount, items
    AMOUNT_SCORE_TOLERANCE: float = _env_float("AMOUNT_SCORE_TOLERANCE", 0.1)  # 10% counts as full amount score

    # Delivery selection
    DELIVERY_MATCH_THRESHOLD: float = _env_float("DELIVERY_MATCH_THRESHOLD", 0.6)
    DELIVERY_WEIGHTS: Tuple[float, float] = (0.5, 0.5)  # vendor, items

    # Item matching
    ITEM_DESCRIPTION_THRESHOLD: float = _env_float("ITEM_DESCRIPTION_THRESHOLD", 0.7)
    ITEM_PRICE_TOLERANCE: float = _env_float("ITEM_PRICE_TOLERANCE", 0.05)  # 5% unit price tolerance
    ITEM_QUANTITY_TOLERANCE: float = _env_float("ITEM_QUANTITY_TOLERANCE", 1)  # units
    UNVERIFIED_ITEM_FACTOR: float = 0.5  # weight of a matched item whose price/quantity did not check out

    # Amount verification
    AMOUNT_MATCH_TOLERANCE: float = _env_float("AMOUNT_MATCH_TOLERANCE", 0.05)  # 5% tolerance

    # Flags
    ITEM_SIMILARITY_FLAG_THRESHOLD: float = _env_float("ITEM_SIMILARITY_FLAG_THRESHOLD", 0.8)
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "₹")

    # Decision Logic
    AUTO_APPROVE: bool = _env_bool("AUTO_APPROVE", False)
    AUTO_APPROVE_SCORE: float = 1.0

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = os.getenv("LOG_FILE", "invoice_matching.log")

    # Data Paths
    DATA_PATH: str = os.getenv(
        "DATA_PATH", os.path.join(os.path.dirname(__file__), "data", "matching_data.json")
    )

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_DEBUG: bool = _env_bool("API_DEBUG", False)

    # Workflow Configuration
    GRAPH_RECURSION_LIMIT: int = 25

    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        thresholds = {
            "PO_MATCH_THRESHOLD": cls.PO_MATCH_THRESHOLD,
            "PO_HIGH_CONFIDENCE_THRESHOLD": cls.PO_HIGH_CONFIDENCE_THRESHOLD,
            "AMOUNT_SCORE_TOLERANCE": cls.AMOUNT_SCORE_TOLERANCE,
            "DELIVERY_MATCH_THRESHOLD": cls.DELIVERY_MATCH_THRESHOLD,
            "ITEM_DESCRIPTION_THRESHOLD": cls.ITEM_DESCRIPTION_THRESHOLD,
            "ITEM_PRICE_TOLERANCE": cls.ITEM_PRICE_TOLERANCE,
            "AMOUNT_MATCH_TOLERANCE": cls.AMOUNT_MATCH_TOLERANCE,
            "ITEM_SIMILARITY_FLAG_THRESHOLD": cls.ITEM_SIMILARITY_FLAG_THRESHOLD,
            "UNVERIFIED_ITEM_FACTOR": cls.UNVERIFIED_ITEM_FACTOR,
        }
        for name, value in thresholds.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

        if cls.ITEM_QUANTITY_TOLERANCE < 0:
            raise ValueError(f"ITEM_QUANTITY_TOLERANCE must not be negative, got {cls.ITEM_QUANTITY_TOLERANCE}")

        for name, weights in (("PO_WEIGHTS", cls.PO_WEIGHTS), ("DELIVERY_WEIGHTS", cls.DELIVERY_WEIGHTS)):
            if abs(sum(weights) - 1.0) > 1e-9:
                raise ValueError(f"{name} must sum to 1, got {sum(weights)}")

        if cls.LOG_LEVEL.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid LOG_LEVEL: {cls.LOG_LEVEL}")


class DevelopmentConfig(Config):
    """Development configuration."""
    LOG_LEVEL = "DEBUG"
    API_DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    LOG_LEVEL = "INFO"
    API_DEBUG = False


class TestConfig(Config):
    """Test configuration."""
    LOG_LEVEL = "DEBUG"
    AUTO_APPROVE = False


def get_config(env: str = None) -> Config:
    """Get configuration based on environment."""
    if env is None:
        env = os.getenv("ENV", "development").lower()

    if env == "production":
        config = ProductionConfig()
    elif env == "test":
        config = TestConfig()
    else:
        config = DevelopmentConfig()

    # Validate configuration on creation
    config.validate()
    return config
