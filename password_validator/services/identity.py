"""Resolution of a user id to the user record used for placeholder substitution."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from password_validator.logging_config import get_logger
from password_validator.services.context import RequestContext
from password_validator.services.errors import IdentityErrorKind, IdentityResolutionError

logger = get_logger(__name__)

USERS_PATH = "/users"
TOTAL_RECORDS_KEY = "totalRecords"
USERS_KEY = "users"
USERNAME_KEY = "username"


@dataclass(frozen=True)
class ResolvedUser:
    """A user as returned by the identity service."""

    id: str
    username: str
    record: dict[str, Any] = field(default_factory=dict, compare=False)


class IdentityResolver(ABC):
    """Looks up the user a password belongs to."""

    @abstractmethod
    async def resolve_user(self, user_id: str, context: RequestContext) -> ResolvedUser:
        """Resolve exactly one user or raise IdentityResolutionError."""
        ...


def parse_users_response(user_id: str, payload: Any) -> ResolvedUser:
    """Extract the single user from a users query response.

    Any disagreement between ``totalRecords`` and the ``users`` array is
    treated as a malformed response rather than trusting either field.
    """
    if not isinstance(payload, dict) or TOTAL_RECORDS_KEY not in payload or USERS_KEY not in payload:
        raise IdentityResolutionError(
            "Error, missing field(s) 'totalRecords' and/or 'users' in user response object",
            kind=IdentityErrorKind.MALFORMED,
            user_id=user_id,
        )

    total = payload[TOTAL_RECORDS_KEY]
    users = payload[USERS_KEY]
    if isinstance(total, bool) or not isinstance(total, int) or not isinstance(users, list):
        raise IdentityResolutionError(
            "Error, 'totalRecords' must be an integer and 'users' a list",
            kind=IdentityErrorKind.MALFORMED,
            user_id=user_id,
        )
    if total != len(users):
        raise IdentityResolutionError(
            f"Error, 'totalRecords' is {total} but {len(users)} user(s) were returned",
            kind=IdentityErrorKind.MALFORMED,
            user_id=user_id,
        )

    if total == 0:
        raise IdentityResolutionError(
            f"No user found by user id: {user_id}",
            kind=IdentityErrorKind.NOT_FOUND,
            user_id=user_id,
        )
    if total > 1:
        raise IdentityResolutionError(
            "Bad results from username",
            kind=IdentityErrorKind.AMBIGUOUS,
            user_id=user_id,
        )

    user = users[0]
    if not isinstance(user, dict) or not isinstance(user.get(USERNAME_KEY), str):
        raise IdentityResolutionError(
            "Error, user record has no 'username'",
            kind=IdentityErrorKind.MALFORMED,
            user_id=user_id,
        )
    return ResolvedUser(id=str(user.get("id", user_id)), username=user[USERNAME_KEY], record=user)


class HttpIdentityResolver(IdentityResolver):
    """Queries the users endpoint of the gateway named in the request context."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = 1.0):
        self.client = client
        self.timeout = httpx.Timeout(timeout)

    async def resolve_user(self, user_id: str, context: RequestContext) -> ResolvedUser:
        url = context.url_for(USERS_PATH)
        try:
            response = await self.client.get(
                url,
                params={"query": f"id=={user_id}"},
                headers=context.forward_headers(),
                timeout=self.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("User lookup failed", url=url, user_id=user_id, error=str(e))
            raise IdentityResolutionError(
                f"Error looking up user at url '{url}': {e}",
                kind=IdentityErrorKind.UNAVAILABLE,
                user_id=user_id,
            ) from e

        if response.status_code != httpx.codes.OK:
            logger.error(
                "User lookup returned unexpected status",
                url=url,
                user_id=user_id,
                status_code=response.status_code,
            )
            raise IdentityResolutionError(
                f"Error looking up user at url '{url}' Expected status code 200, "
                f"got '{response.status_code}' :{response.text}",
                kind=IdentityErrorKind.UNAVAILABLE,
                user_id=user_id,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise IdentityResolutionError(
                "Error, user response is not valid JSON",
                kind=IdentityErrorKind.MALFORMED,
                user_id=user_id,
            ) from e

        try:
            return parse_users_response(user_id, payload)
        except IdentityResolutionError as e:
            logger.error("User lookup rejected", user_id=user_id, kind=e.kind.value, error=e.message)
            raise
