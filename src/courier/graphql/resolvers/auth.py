from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy.exc import IntegrityError

from ...auth.passwords import verify_password
from ...auth.tokens import create_token
from ...config import get_secret, settings
from ...database.connection import session_scope
from ...dbmodels import Users
from ...errors import AuthenticationError, ModelValidationError, UserInputError
from ...logging import get_logger

if TYPE_CHECKING:
    from ..types.user import Token

logger = get_logger(__name__)


def _issue_token(info: strawberry.Info, user: Users) -> Token:
    from ..types.user import Token

    token = create_token(
        user,
        info.context.secret or get_secret(),
        expires_in=timedelta(minutes=settings.token_expiry_minutes),
        algorithm=settings.jwt_algorithm,
    )
    return Token(token=token)


async def resolve_sign_up(
    info: strawberry.Info, username: str, email: str, password: str
) -> Token:
    async with session_scope(info.context.session_factory) as session:
        user = Users(username=username, email=email, password=password)
        session.add(user)
        try:
            await session.flush()
        except IntegrityError as e:
            raise ModelValidationError("must be unique") from e

        logger.info("User signed up", user_id=user.id)
        return _issue_token(info, user)


async def resolve_sign_in(info: strawberry.Info, login: str, password: str) -> Token:
    async with session_scope(info.context.session_factory) as session:
        user = await Users.find_by_login(session, login)

        if user is None:
            raise UserInputError("No user found with this login credentials.")

        if not verify_password(password, user.password):
            logger.info("Sign-in rejected", user_id=user.id)
            raise AuthenticationError("Invalid password.")

        return _issue_token(info, user)
