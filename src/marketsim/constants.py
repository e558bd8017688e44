"""Core constants for marketsim."""

from datetime import datetime, timedelta, timezone
from enum import Enum


class Trend(str, Enum):
    """Coarse direction of the last price move."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class OrderSide(str, Enum):
    """Order side (buy/sell)."""

    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, Enum):
    """Order status. The synthesizer only ever produces PENDING."""

    PENDING = "pending"
    FILLED = "filled"
    CANCELLED = "cancelled"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ============================================
# Generation Defaults
# ============================================

# Fixed session start so every build shares the same time axis
SESSION_START = datetime(2026, 2, 28, 9, 30, tzinfo=timezone.utc)
TICK_INTERVAL = timedelta(minutes=1)
DEFAULT_TICK_COUNT = 100

PRICE_FLOOR = 0.01
CRASH_FACTOR = 0.7
TREND_EPSILON = 0.0001

# ============================================
# Order Book Defaults
# ============================================

BUYS_PER_INSTRUMENT = 2
BID_LOW = 0.97
BID_SPAN = 0.025
ASK_LOW = 1.005
ASK_SPAN = 0.025
MIN_ORDER_QTY = 10
MAX_ORDER_QTY = 500
ORDER_WINDOW = timedelta(minutes=90)
BOOK_DISPLAY_DEPTH = 8

FAKE_USERS = ("usr-alpha", "usr-beta", "usr-gamma", "usr-delta", "usr-epsilon")

# ============================================
# Application Constants
# ============================================

APP_NAME = "marketsim"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_FORMAT_JSON = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
