"""
foliosync: portfolio valuation, rebalancing and client-side synchronization.
"""

__version__ = "0.1.0"
