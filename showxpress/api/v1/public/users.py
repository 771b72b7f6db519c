import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from showxpress.db.session import get_db
from showxpress.models.user import User
from showxpress.schemas.user import UserUpsert, User as UserSchema

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", response_model=UserSchema, status_code=status.HTTP_200_OK)
def upsert_user(body: UserUpsert, db: Session = Depends(get_db)):
    """
    Create or refresh the profile of a user signed in through the identity
    provider. The provider's values are trusted as-is.
    """
    taken = db.query(User).filter(User.email == body.email, User.clerk_id != body.clerk_id).first()
    if taken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = db.query(User).filter(User.clerk_id == body.clerk_id).first()
    if user:
        user.name = body.name
        user.email = body.email
        user.image = body.image or ""
    else:
        user = User(
            clerk_id=body.clerk_id,
            name=body.name,
            email=body.email,
            image=body.image or "",
            role="user",
        )
        db.add(user)
        logger.info("New user %s", body.clerk_id)
    db.commit()
    db.refresh(user)
    return user


@router.get("/{clerk_id}", response_model=UserSchema)
def get_user(clerk_id: str, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.clerk_id == clerk_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
