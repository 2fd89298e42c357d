"""Per-request context forwarded to remote collaborators."""

from dataclasses import dataclass
from typing import Mapping, Optional

OKAPI_HEADER_TENANT = "X-Okapi-Tenant"
OKAPI_HEADER_TOKEN = "X-Okapi-Token"
OKAPI_HEADER_URL = "X-Okapi-Url"


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


@dataclass(frozen=True)
class RequestContext:
    """Tenant and credentials of the caller of one validate call."""

    tenant_id: str
    okapi_url: str
    token: Optional[str] = None

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        default_okapi_url: str,
    ) -> "RequestContext":
        """Build a context from request headers, matching names case-insensitively.

        Raises:
            ValueError: If the tenant header is missing or empty
        """
        tenant_id = _header(headers, OKAPI_HEADER_TENANT)
        if not tenant_id:
            raise ValueError(f"Missing required header {OKAPI_HEADER_TENANT}")
        return cls(
            tenant_id=tenant_id,
            okapi_url=_header(headers, OKAPI_HEADER_URL) or default_okapi_url,
            token=_header(headers, OKAPI_HEADER_TOKEN),
        )

    def url_for(self, path: str) -> str:
        """Absolute URL of a path on the remote gateway."""
        if not path.startswith("/"):
            path = "/" + path
        return self.okapi_url.rstrip("/") + path

    def forward_headers(self) -> dict[str, str]:
        """Headers carried on every outbound call."""
        headers = {
            OKAPI_HEADER_TENANT: self.tenant_id,
            "Accept": "application/json",
        }
        if self.token:
            headers[OKAPI_HEADER_TOKEN] = self.token
        return headers
