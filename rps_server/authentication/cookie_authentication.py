import logging

from fastapi import Cookie, HTTPException, Request, status

from rps_server.errors import UnknownUserError
from rps_server.models.game_models import UserModel
from rps_server.session_registry import SessionRegistry

USER_ID_COOKIE = "user_id"


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


class CookieAuthentication:
    def __init__(self):
        pass

    def check_user_data(
        self,
        request: Request,
        user_id: str | None = Cookie(default=None),
    ) -> UserModel:
        """Resolve the logged in user from the id cookie set at login.
        The display name never travels in a cookie; it is read from the session.

        Args:
            request (Request): Current request, used to reach the session registry
            user_id (str | None, optional): Opaque id cookie. Defaults to Cookie(default=None).

        Raises:
            HTTPException: The cookie is missing, or no live session matches it

        Returns:
            UserModel: The authenticated user
        """
        if user_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not logged in",
            )
        try:
            session = get_registry(request).authenticate(user_id)
        except UnknownUserError:
            logging.info("rejected unknown or expired session")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session expired, please log in again",
            )
        return UserModel(user_id=user_id, user_name=session.user_name)
