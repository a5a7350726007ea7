"""SerpAPI shopping search client."""

from allergen_finder.clients.serpapi.client import SerpApiClient


__all__ = ["SerpApiClient"]
