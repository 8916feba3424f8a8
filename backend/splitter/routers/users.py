"""Users: create, list, get, update, delete."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from splitter.database import get_db
from splitter.models import User
from splitter.schemas import UserCreate, UserResponse
from splitter.services.directory import get_user

router = APIRouter(prefix="/users", tags=["users"])


def _check_email_free(db: Session, email: str, user_id: Optional[int] = None) -> None:
    existing = db.query(User).filter(User.email == email).first()
    if existing and existing.id != user_id:
        raise HTTPException(status_code=400, detail="Email already registered")


@router.post("", response_model=UserResponse, status_code=201)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    _check_email_free(db, data.email)
    user = User(name=data.name, email=data.email, phone_number=data.phone_number)
    db.add(user)
    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


@router.get("", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return [UserResponse.model_validate(u) for u in db.query(User).order_by(User.id).all()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    return UserResponse.model_validate(get_user(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, data: UserCreate, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    _check_email_free(db, data.email, user_id)
    user.name = data.name
    user.email = data.email
    user.phone_number = data.phone_number
    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    if user.groups:
        raise HTTPException(status_code=400, detail="User is still a member of a group")
    db.delete(user)
    db.commit()
