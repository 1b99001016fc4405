"""Abstract interface for decorative image providers."""
from abc import ABC, abstractmethod
from typing import Optional
from app.providers.models import Photo


class ImageProvider(ABC):
    """Abstract base class for image search providers."""
    
    @abstractmethod
    async def search(self, query: str) -> Optional[Photo]:
        """
        Find a decorative image for a query.
        
        Args:
            query: Search term, e.g. "finance"
            
        Returns:
            Photo, or None when nothing is found or the provider is unavailable.
            Implementations never raise to the caller.
        """
        pass
    
    async def close(self):
        """Release provider resources."""
        pass


class NullImageProvider(ImageProvider):
    """Provider used when no image credential is configured."""
    
    async def search(self, query: str) -> Optional[Photo]:
        return None


class ProviderError(Exception):
    """Exception raised when provider API fails."""
    pass
