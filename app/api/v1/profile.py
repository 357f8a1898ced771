"""Owner profile — the personal fields shown on public portfolio pages."""

from fastapi import APIRouter, HTTPException, status

from app.api.deps import Auth, Session
from app.models.user import ProfileUpdate, User, UserRead

router = APIRouter(prefix="/profile", tags=["profile"])


@router.patch("", response_model=UserRead)
async def update_profile(body: ProfileUpdate, auth: Auth, session: Session) -> UserRead:
    user = await session.get(User, auth.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field == "name":
            continue
        setattr(user, field, value)

    user.touch()
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return UserRead.model_validate(user)
