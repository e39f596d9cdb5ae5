"""Rate limiting adapters.

Available implementations:
- ClientRateLimiter: Minimum spacing between requests per client
"""

from .client_rate_limiter import ClientRateLimiter, client_id_from_headers

__all__ = ["ClientRateLimiter", "client_id_from_headers"]
