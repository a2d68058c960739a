"""Proxy header parsing for short URL building and access logging."""

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple


def _first_hop(value: Optional[str]) -> Optional[str]:
    """First entry of a comma-separated proxy header, or None when empty."""
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


@dataclass(frozen=True)
class ForwardedHeaders:
    """What the nearest proxy told us about the original request.

    Chained proxies append to X-Forwarded-*; only the first hop describes
    the client, so ``proto`` and ``host`` keep the first entry and
    ``client_chain`` keeps every address in order.
    """

    proto: Optional[str] = None
    host: Optional[str] = None
    client_chain: Tuple[str, ...] = ()
    real_ip: Optional[str] = None
    prefix: str = ""

    @classmethod
    def parse(cls, headers: Mapping[str, str]) -> "ForwardedHeaders":
        """Read X-Forwarded-Proto/Host/For/Prefix and X-Real-IP, ignoring case."""
        lower = {k.lower(): v for k, v in headers.items()}

        chain = tuple(
            part.strip()
            for part in (lower.get("x-forwarded-for") or "").split(",")
            if part.strip()
        )
        prefix = (lower.get("x-forwarded-prefix") or "").strip().strip("/")

        return cls(
            proto=_first_hop(lower.get("x-forwarded-proto")),
            host=_first_hop(lower.get("x-forwarded-host")),
            client_chain=chain,
            real_ip=(lower.get("x-real-ip") or "").strip() or None,
            prefix="/" + prefix if prefix else "",
        )

    def client_ip(self, remote_addr: Optional[str] = None) -> str:
        """Client address: X-Forwarded-For, then X-Real-IP, then the peer."""
        if self.client_chain:
            return self.client_chain[0]
        if self.real_ip:
            return self.real_ip
        return remote_addr or "unknown"

    def base_url(
        self,
        fallback_base_url: str,
        request_scheme: Optional[str] = None,
        request_host: Optional[str] = None,
    ) -> str:
        """Scheme and host that short URLs should be built on.

        Priority:
        1. X-Forwarded-Proto + X-Forwarded-Host
        2. Request scheme + Host header
        3. Configured base URL

        Returns:
            Base URL without trailing slash (e.g., https://sho.rt)
        """
        if self.proto and self.host:
            return f"{self.proto}://{self.host}"

        if request_scheme and request_host:
            return f"{request_scheme}://{request_host}"

        return fallback_base_url.rstrip("/")
