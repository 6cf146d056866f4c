"""
Image reference resolution.

Search results and uploads carry image references that are either
absolute URLs or paths relative to the image host. BaseUrlImageResolver
turns them into displayable URLs.
"""

from dataclasses import dataclass

ABSOLUTE_PREFIXES = ("http://", "https://")


@dataclass(frozen=True)
class BaseUrlImageResolver:
    """
    Resolve relative image paths against a base URL.

    Example:
        resolver = BaseUrlImageResolver("https://cdn.example.com")
        resolver.resolve("/uploads/42.jpg")
        # "https://cdn.example.com/uploads/42.jpg"
    """

    base_url: str

    def resolve(self, raw_url: str) -> str | None:
        """
        Resolve one image reference.

        Returns:
            Display URL, or None for a blank reference
        """
        raw_url = (raw_url or "").strip()
        if not raw_url:
            return None
        if raw_url.startswith(ABSOLUTE_PREFIXES):
            return raw_url
        return f"{self.base_url.rstrip('/')}/{raw_url.lstrip('/')}"
