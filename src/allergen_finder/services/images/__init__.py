"""Display image resolution and caching."""

from allergen_finder.services.images.cache import CachedImage, ImageCache
from allergen_finder.services.images.resolver import ImageResolver, extract_page_image


__all__ = ["CachedImage", "ImageCache", "ImageResolver", "extract_page_image"]
