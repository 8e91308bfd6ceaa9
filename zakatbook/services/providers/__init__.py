"""Pluggable live metal price source interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class MetalQuote:
    """Accepted spot quote."""
    metal: str                  # gold, silver
    price_per_gram_usd: float
    source: str


class MetalProvider(ABC):
    """Abstract base for live metal price sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier."""
        pass

    @abstractmethod
    def get_spot_price(self, metal: str) -> float:
        """Fetch the raw spot quote for a metal.

        The unit of the returned number (per ounce or per gram) is not
        guaranteed; callers normalize it.

        Raises:
            ProviderError: If fetch fails
        """
        pass


class ProviderError(Exception):
    """Base exception for price source errors."""
    pass


class RateLimitError(ProviderError):
    """API rate limit exceeded."""
    pass


class NetworkError(ProviderError):
    """Network connectivity issue."""
    pass


class InvalidQuoteError(ProviderError):
    """Payload was malformed or the price was not plausible."""
    pass
