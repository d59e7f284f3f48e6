from typing import Optional

from fastapi import Header

from src.platform.exception.exceptions import AuthenticationError
from src.service.film_booking.domain.value_object.session_context import SessionContext


async def get_session_context(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> SessionContext:
    """Bearer token (forwarded to the backend) plus the caller's user id."""
    scheme, _, token = (authorization or '').partition(' ')
    if scheme.lower() != 'bearer' or not token.strip() or not x_user_id:
        raise AuthenticationError('Missing bearer token or X-User-Id header')
    return SessionContext(token=token.strip(), user_id=x_user_id)


async def get_optional_session_context(
    authorization: Optional[str] = Header(default=None),
    x_user_id: Optional[str] = Header(default=None),
) -> Optional[SessionContext]:
    """Same as get_session_context, but anonymous callers get None instead of a 401."""
    if authorization is None and x_user_id is None:
        return None
    return await get_session_context(authorization=authorization, x_user_id=x_user_id)
