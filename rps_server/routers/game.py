import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from rps_server.authentication.cookie_authentication import (
    USER_ID_COOKIE,
    CookieAuthentication,
    get_registry,
)
from rps_server.converter import ViewConverter
from rps_server.domain.session import ReissuePolicy
from rps_server.errors import NoPendingRoundError, RoundAlreadyPendingError, UnknownUserError
from rps_server.models.game_models import (
    GameViewModel,
    LoginModel,
    MessageModel,
    PlayModel,
    UserModel,
)
from rps_server.session_registry import SessionRegistry

game_router = APIRouter()
cookie_auth = CookieAuthentication()
view_converter = ViewConverter()


def session_expired() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Session expired, please log in again",
    )


class LoginServer:
    @staticmethod
    @game_router.post("/login", response_model=GameViewModel, response_model_exclude_none=True)
    def login(
        login: LoginModel,
        request: Request,
        response: Response,
        registry: SessionRegistry = Depends(get_registry),
    ) -> GameViewModel:
        previous_user_id = request.cookies.get(USER_ID_COOKIE)
        if previous_user_id is not None:
            registry.logout(previous_user_id)
        user_id, score = registry.login(login.user_name)
        # Only the hex id goes into the cookie, so any display name is safe to store
        response.set_cookie(
            USER_ID_COOKIE,
            user_id,
            httponly=True,
            samesite="lax",
            secure=request.app.state.settings.cookie_secure,
        )
        return view_converter.convert_score_to_view(login.user_name, score, None)

    @staticmethod
    @game_router.post("/logout", response_model=MessageModel)
    def logout(
        request: Request,
        response: Response,
        registry: SessionRegistry = Depends(get_registry),
    ) -> MessageModel:
        user_id = request.cookies.get(USER_ID_COOKIE)
        if user_id is not None:
            registry.logout(user_id)
        response.delete_cookie(USER_ID_COOKIE)
        return MessageModel(detail="Successfully logged out.")


class GameServer:
    @staticmethod
    @game_router.get("/", response_model=GameViewModel, response_model_exclude_none=True)
    def index(
        user: UserModel = Depends(cookie_auth.check_user_data),
        registry: SessionRegistry = Depends(get_registry),
    ) -> GameViewModel:
        """Start a new round and show its commitment"""
        try:
            user_name, score, commitment = registry.challenge(user.user_id)
        except RoundAlreadyPendingError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        except UnknownUserError:
            raise session_expired()
        return view_converter.convert_score_to_view(user_name, score, commitment)

    @staticmethod
    @game_router.post("/play", response_model=GameViewModel, response_model_exclude_none=True)
    def play(
        play: PlayModel,
        user: UserModel = Depends(cookie_auth.check_user_data),
        registry: SessionRegistry = Depends(get_registry),
    ) -> GameViewModel:
        """Reveal the answered round, score it and start the next round"""
        try:
            result = registry.submit_answer(user.user_id, play.hand, play.commitment)
        except NoPendingRoundError as e:
            # Nothing was scored: show the unchanged score with a round to answer
            logging.warning(f"play without pending round: {e}")
            try:
                user_name, score, commitment = registry.challenge(
                    user.user_id, ReissuePolicy.keep
                )
            except UnknownUserError:
                raise session_expired()
            return view_converter.convert_score_to_view(user_name, score, commitment)
        except UnknownUserError:
            raise session_expired()
        return view_converter.convert_result_to_view(user.user_name, result)

    @staticmethod
    @game_router.get("/score", response_model=GameViewModel, response_model_exclude_none=True)
    def score(
        user: UserModel = Depends(cookie_auth.check_user_data),
        registry: SessionRegistry = Depends(get_registry),
    ) -> GameViewModel:
        try:
            user_name, score, commitment = registry.view(user.user_id)
        except UnknownUserError:
            raise session_expired()
        return view_converter.convert_score_to_view(user_name, score, commitment)
