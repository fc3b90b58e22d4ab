"""
Market data provider adapters.

Each adapter implements pricewatch.interfaces.PriceSource.
"""
