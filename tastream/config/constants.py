"""
Centralized constants for tastream indicators.

Default parameters follow the textbook conventions (Wilder, Appel, Lane,
Bollinger). Neutral values are what an indicator returns when its formula
would divide by zero on legitimate input (flat price, no volume, ...).
"""

# ==================== Period Limits ====================

# Upper bound on any period/window; guards against accidental huge arenas.
# Overridable via TASTREAM_MAX_PERIOD (see config.py).
MAX_PERIOD = 100_000


# ==================== Default Parameters ====================

DEFAULT_MA_PERIOD = 20
DEFAULT_RSI_PERIOD = 14
DEFAULT_ROC_PERIOD = 10
DEFAULT_WINDOW_PERIOD = 14

DEFAULT_MACD_FAST = 12
DEFAULT_MACD_SLOW = 26
DEFAULT_MACD_SIGNAL = 9

DEFAULT_BB_PERIOD = 20
DEFAULT_BB_MULTIPLIER = 2.0

DEFAULT_KC_PERIOD = 10
DEFAULT_KC_MULTIPLIER = 2.0

DEFAULT_STOCH_K = 14
DEFAULT_STOCH_D = 3
DEFAULT_SLOW_STOCH_EMA = 3

DEFAULT_ATR_PERIOD = 14
DEFAULT_ADX_PERIOD = 14
DEFAULT_CCI_PERIOD = 20
DEFAULT_MFI_PERIOD = 14
DEFAULT_ER_PERIOD = 10
DEFAULT_CORRELATION_PERIOD = 30

# Lambert's constant for CCI
CCI_SCALE = 0.015

ATR_SMOOTHINGS = ("wilder", "ema", "sma")


# ==================== Neutral Values ====================

RSI_NEUTRAL = 50.0
RSI_NO_LOSS = 100.0
STOCH_NEUTRAL = 50.0
WILLR_NEUTRAL = -50.0
MFI_NEUTRAL = 50.0
CCI_NEUTRAL = 0.0
ER_NO_PATH = 1.0
CORRELATION_NEUTRAL = 0.0
ADX_WARMUP = 0.0
