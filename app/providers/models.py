"""Data models for image provider results."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Photo:
    """Image picked from a provider search."""
    image_url: Optional[str]
    photographer: Optional[str]
    source_url: Optional[str] = None
