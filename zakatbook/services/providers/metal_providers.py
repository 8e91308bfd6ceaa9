"""Live metal price source implementations."""
import http.client
import json
import urllib.error
import urllib.request

from zakatbook.services.config import get_request_timeout_seconds, get_user_agent
from . import InvalidQuoteError, MetalProvider, NetworkError, ProviderError, RateLimitError


class MetalsLiveProvider(MetalProvider):
    """metals.live spot API - no API key required.

    Returns a spot quote, typically USD per troy ounce, as
    ``{"price": <number>}`` or a list of such objects.
    """

    BASE_URL = "https://api.metals.live/v1/spot"

    @property
    def name(self) -> str:
        return "metals-live"

    def get_spot_price(self, metal: str) -> float:
        url = f"{self.BASE_URL}/{metal}"

        try:
            req = urllib.request.Request(url, headers={'User-Agent': get_user_agent()})
            with urllib.request.urlopen(req, timeout=get_request_timeout_seconds()) as response:
                data = json.loads(response.read().decode('utf-8'))
        except urllib.error.HTTPError as e:
            if e.code == 429:
                raise RateLimitError("Rate limit exceeded")
            raise ProviderError(f"HTTP error: {e.code}")
        except urllib.error.URLError as e:
            raise NetworkError(f"Network error: {e.reason}")
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidQuoteError("Invalid JSON response")
        except TimeoutError:
            raise NetworkError("Request timed out")
        except (OSError, http.client.HTTPException) as e:
            raise NetworkError(f"Connection failed: {e!r}")

        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise InvalidQuoteError("Unexpected payload shape")

        price = data.get('price')
        if price is None:
            raise InvalidQuoteError("Missing price in response")
        try:
            return float(price)
        except (TypeError, ValueError):
            raise InvalidQuoteError(f"Non-numeric price: {price!r}")


class StaticMetalProvider(MetalProvider):
    """Offline provider returning fixed per-gram quotes (for disabled network)."""

    def __init__(self, prices: dict):
        self._prices = dict(prices)

    @property
    def name(self) -> str:
        return "static"

    def get_spot_price(self, metal: str) -> float:
        if metal not in self._prices:
            raise ProviderError(f"No static price for {metal}")
        return self._prices[metal]
