import logging
from typing import List, Optional, Union

from sqlalchemy import select

from src.db.interfaces.base import BaseDatabase
from src.exceptions import UserNotFoundError
from src.models.user import User, utc_now
from src.schemas.api.users import UserResponse
from src.services.results import Failure, Result, Success

logger = logging.getLogger(__name__)

UserId = Union[int, str]

# Range of the INTEGER primary key column
MIN_USER_ID = -(2**31)
MAX_USER_ID = 2**31 - 1


def parse_user_id(user_id: UserId) -> Optional[int]:
    """Numeric id, or None when the value cannot name a user."""
    try:
        numeric_id = int(user_id)
    except (TypeError, ValueError):
        return None
    if not MIN_USER_ID <= numeric_id <= MAX_USER_ID:
        return None
    return numeric_id


class UserService:
    """CRUD operations on users. Every failure comes back as a Failure result."""

    def __init__(self, database: BaseDatabase):
        self.database = database

    def list_users(self) -> Result[List[UserResponse]]:
        try:
            with self.database.get_session() as session:
                users = session.scalars(
                    select(User).order_by(User.created_at.desc(), User.id.desc())
                ).all()
                data = [UserResponse.model_validate(user) for user in users]
            return Success(data=data, count=len(data))
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            return Failure.from_exception(e)

    def create_user(self, name: str, email: str) -> Result[UserResponse]:
        try:
            with self.database.get_session() as session:
                user = User(name=name, email=email)
                session.add(user)
                session.flush()
                data = UserResponse.model_validate(user)
            return Success(data=data)
        except Exception as e:
            logger.error(f"Error creating user: {e}")
            return Failure.from_exception(e)

    def get_user(self, user_id: UserId) -> Result[UserResponse]:
        try:
            with self.database.get_session() as session:
                user = self._find(session, user_id)
                data = UserResponse.model_validate(user)
            return Success(data=data)
        except UserNotFoundError:
            return Failure.user_not_found()
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            return Failure.from_exception(e)

    def update_user(self, user_id: UserId, name: str, email: str) -> Result[UserResponse]:
        try:
            with self.database.get_session() as session:
                user = self._find(session, user_id)
                user.name = name
                user.email = email
                user.updated_at = utc_now()
                session.flush()
                data = UserResponse.model_validate(user)
            return Success(data=data)
        except UserNotFoundError:
            return Failure.user_not_found()
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            return Failure.from_exception(e)

    def delete_user(self, user_id: UserId) -> Result[UserResponse]:
        try:
            with self.database.get_session() as session:
                user = self._find(session, user_id)
                data = UserResponse.model_validate(user)
                session.delete(user)
            return Success(data=data)
        except UserNotFoundError:
            return Failure.user_not_found()
        except Exception as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            return Failure.from_exception(e)

    @staticmethod
    def _find(session, user_id: UserId) -> User:
        numeric_id = parse_user_id(user_id)
        user = session.get(User, numeric_id) if numeric_id is not None else None
        if user is None:
            raise UserNotFoundError(user_id)
        return user
