from .media_fetcher import HttpMediaFetcher

__all__ = ["HttpMediaFetcher"]
