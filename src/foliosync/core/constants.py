"""
Core constants and business rules.

Defines system-wide defaults for rebalancing, validation limits, and the
client-side synchronization layer.
"""

# Rebalancing defaults
REBALANCE_THRESHOLD = 5.0  # Percentage points before an action is recommended
MIN_TRADING_UNIT = 1.0  # Smallest tradable quantity step
DEFAULT_COMMISSION = 0.0  # Commission per unit traded
EXTREME_REBALANCE_RATIO = 0.5  # Flag plans moving more than 50% of portfolio value

# Allocation rules
TOTAL_PORTFOLIO_WEIGHT = 100.0
MIN_STOCK_WEIGHT = 0.0
MAX_STOCK_WEIGHT = 100.0
WEIGHT_TOLERANCE = 0.01  # Allowed rounding error on total weight

# Imbalance severity buckets (absolute weight difference)
HIGH_SEVERITY_DIFFERENCE = 10.0
MEDIUM_SEVERITY_DIFFERENCE = 5.0

# Health score weighting
HEALTH_DIVERSIFICATION_WEIGHT = 0.4
HEALTH_PERFORMANCE_WEIGHT = 0.3
HEALTH_RISK_WEIGHT = 0.3

# Trading insight priority limits
HIGH_PRIORITY_TRADES = 5
HIGH_PRIORITY_BUY_VALUE = 10000.0
MEDIUM_PRIORITY_TRADES = 2
MEDIUM_PRIORITY_BUY_VALUE = 1000.0

# Validation limits
MIN_QUANTITY = 0.0
MAX_QUANTITY = 999999.0
MIN_PRICE = 0.01
MAX_PRICE = 999999.0
MAX_STOCK_NAME_LENGTH = 50
MAX_TICKER_LENGTH = 10
MIN_PORTFOLIO_NAME_LENGTH = 1
MAX_PORTFOLIO_NAME_LENGTH = 100

# Client-side store
TEMP_ID_PREFIX = "temp_"
TEMP_OWNER_ID = "temp_user"

# Local cache
CACHE_MAX_ENTRIES = 64
CACHE_KEY_HOLDINGS = "portfolio_data"
CACHE_KEY_TARGET_PORTFOLIOS = "target_portfolios"
CACHE_KEY_SELECTED_TARGET_PORTFOLIO = "selected_target_portfolio"
CACHE_KEY_SELECTED_HOLDING = "selected_holding"

# Fallback messages for remote failures that carry no description
FALLBACK_ERROR_MESSAGES = {
    "fetch": "Failed to fetch {label}",
    "create": "Failed to create {label}",
    "update": "Failed to update {label}",
    "delete": "Failed to delete {label}",
}
