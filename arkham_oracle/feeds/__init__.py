from arkham_oracle.feeds.coingecko import DEFAULT_DATA_SOURCE_URL, CoinGeckoPriceSource

__all__ = ["CoinGeckoPriceSource", "DEFAULT_DATA_SOURCE_URL"]
