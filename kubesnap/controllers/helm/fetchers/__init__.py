"""Fetchers for the helm controller."""

from kubesnap.controllers.helm.fetchers.release_fetcher import ReleaseFetcher

__all__ = ["ReleaseFetcher"]
