from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from hostel_attendance.db.session import get_session
from hostel_attendance.models.enums import ProfileRole
from hostel_attendance.models.profile import Profile
from hostel_attendance.models.student import Student
from hostel_attendance.core.security import decode_token

# Tokens come from the external auth provider; there is no login route here
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=True)

STAFF_ROLES = (ProfileRole.ADMIN, ProfileRole.STAFF)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> Profile:
    """
    Validate the access token and return the caller's profile.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type (access token required)",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile_id_str = payload.get("sub")
    if profile_id_str is None:
        raise credentials_exception

    try:
        profile_id = int(profile_id_str)
    except ValueError:
        raise credentials_exception

    result = await session.execute(
        select(Profile).where(Profile.id == profile_id)
    )
    profile = result.scalar_one_or_none()

    if profile is None:
        raise credentials_exception

    return profile


async def get_current_active_user(
    current_user: Profile = Depends(get_current_user),
) -> Profile:
    """Get the current active user."""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user


async def get_current_staff(
    current_user: Profile = Depends(get_current_active_user),
) -> Profile:
    """Ensure the current user is staff or an admin."""
    if current_user.role not in STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Staff access required."
        )
    return current_user


async def require_student_access(
    student_id: int,
    current_user: Profile = Depends(get_current_active_user),
    session: AsyncSession = Depends(get_session),
) -> Profile:
    """
    Staff may read any student's attendance; a student only their own.
    """
    if current_user.role in STAFF_ROLES:
        return current_user

    result = await session.execute(
        select(Student.id).where(Student.profile_id == current_user.id)
    )
    own_student_id = result.scalar_one_or_none()
    if own_student_id != student_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own attendance."
        )
    return current_user
