"""
User service - business logic for login accounts
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from app.core.security import hash_password
from app.db.query import active, exists_active, get_active, name_taken, soft_delete
from app.models.employee import Employee
from app.models.permission import UserRole
from app.models.user import User
from app.schemas.user import UserCreate, UserCreateResponse, UserOut, UserUpdate
from app.services.auth_service import user_role_names
from app.services.password_service import generate_temporary_password, generate_username

logger = logging.getLogger(__name__)


def to_user_out(db: Session, user: User) -> UserOut:
    return UserOut(
        id=user.id,
        employee_id=user.employee_id,
        username=user.username,
        email=user.email,
        is_active=user.is_active,
        roles=user_role_names(db, user.id),
        created_at=user.created_at,
    )


def list_users(db: Session) -> List[User]:
    """Active (not deleted) users ordered by username"""
    return active(db, User).order_by(User.username.asc()).all()


def get_user(db: Session, user_id: int) -> User:
    """
    Get a user by ID

    Raises:
        NotFoundError: If the user does not exist or is deleted
    """
    user = get_active(db, User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def _check_email(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    if name_taken(db, User, User.email, email, exclude_id=exclude_id):
        raise ConflictError(f"A user with email '{email}' already exists")


def _check_username(db: Session, username: str, exclude_id: Optional[int] = None) -> None:
    if name_taken(db, User, User.username, username, exclude_id=exclude_id):
        raise ConflictError(f"Username '{username}' is already taken")


def _check_employee(db: Session, employee_id: int, exclude_id: Optional[int] = None) -> None:
    if get_active(db, Employee, employee_id) is None:
        raise NotFoundError(f"Employee with id {employee_id} not found")
    criteria = [User.employee_id == employee_id]
    if exclude_id is not None:
        criteria.append(User.id != exclude_id)
    if exists_active(db, User, *criteria):
        raise ConflictError(f"Employee {employee_id} already has a user account")


def create_user_account(
    db: Session,
    email: str,
    actor_id: int,
    username: Optional[str] = None,
    password: Optional[str] = None,
    employee_id: Optional[int] = None,
    is_active: bool = True,
    first_name: str = "",
    last_name: str = "",
    commit: bool = True,
) -> Tuple[User, Optional[str]]:
    """
    Create a login account

    When no password is given a temporary one is generated and returned
    alongside the user; it is never stored in clear. When no username is
    given it is derived from the first and last name (or the email).

    Returns:
        (user, temporary_password or None)
    """
    _check_email(db, email)
    if employee_id is not None:
        _check_employee(db, employee_id)

    if username:
        username = username.strip()
        _check_username(db, username)
    else:
        if not (first_name or last_name):
            first_name, _, last_name = email.split("@", 1)[0].partition(".")
        username = generate_username(db, first_name, last_name)

    temporary_password = None
    if not password:
        temporary_password = generate_temporary_password()
        password = temporary_password

    user = User(
        email=email,
        username=username,
        password_hash=hash_password(password),
        employee_id=employee_id,
        is_active=is_active,
        created_by=actor_id,
    )
    db.add(user)
    if commit:
        db.commit()
        db.refresh(user)
    else:
        db.flush()

    logger.info("User %s (%s) created by user %s", user.id, username, actor_id)
    return user, temporary_password


def create_user(db: Session, user_data: UserCreate, actor_id: int) -> UserCreateResponse:
    """
    Create a new user account

    Raises:
        ConflictError: If email, username or employee link is already used
        NotFoundError: If the linked employee does not exist
    """
    first_name = last_name = ""
    if user_data.employee_id is not None:
        employee = get_active(db, Employee, user_data.employee_id)
        if employee:
            first_name, last_name = employee.first_name, employee.last_name

    user, temporary_password = create_user_account(
        db,
        email=user_data.email,
        actor_id=actor_id,
        username=user_data.username,
        password=user_data.password,
        employee_id=user_data.employee_id,
        is_active=user_data.is_active,
        first_name=first_name,
        last_name=last_name,
    )
    out = to_user_out(db, user)
    return UserCreateResponse(**out.model_dump(), temporary_password=temporary_password)


def update_user(db: Session, user_id: int, user_data: UserUpdate, actor_id: int) -> User:
    """
    Update a user account; omitted fields are left unchanged

    Raises:
        NotFoundError: If the user does not exist
        ConflictError: If the new email or username is already used
        ValidationError: If a user tries to deactivate itself
    """
    user = get_user(db, user_id)

    if user.id == actor_id and user_data.is_active is False:
        raise ValidationError("You cannot deactivate your own account")

    if user_data.email is not None and user_data.email != user.email:
        _check_email(db, user_data.email, exclude_id=user.id)
        user.email = user_data.email

    if user_data.username is not None:
        username = user_data.username.strip()
        if username.lower() != user.username.lower():
            _check_username(db, username, exclude_id=user.id)
        user.username = username

    if user_data.employee_id is not None and user_data.employee_id != user.employee_id:
        _check_employee(db, user_data.employee_id, exclude_id=user.id)
        user.employee_id = user_data.employee_id

    if user_data.password is not None:
        user.password_hash = hash_password(user_data.password)

    if user_data.is_active is not None:
        user.is_active = user_data.is_active

    user.touch(actor_id)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, actor_id: int) -> None:
    """
    Soft-delete a user account

    Raises:
        NotFoundError: If the user does not exist
        ValidationError: If a user tries to delete itself
        DependencyError: If the user still holds active roles
    """
    user = get_user(db, user_id)

    if user.id == actor_id:
        raise ValidationError("You cannot delete your own account")

    if exists_active(db, UserRole, UserRole.user_id == user.id):
        raise DependencyError(
            f"User {user_id} still has active roles; revoke them before deleting the account"
        )

    soft_delete(user, actor_id)
    db.commit()
    logger.info("User %s deleted by user %s", user_id, actor_id)
