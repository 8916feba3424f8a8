"""Groups: create, list, get, update, delete, add/remove members."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from splitter.database import get_db
from splitter.models import User, Group
from splitter.schemas import GroupCreate, GroupUpdate, GroupResponse, MemberInfo, MessageResponse
from splitter.services import ledger
from splitter.services.directory import get_group, get_user
from splitter.services.money import is_zero
from splitter.store import group_scope

router = APIRouter(prefix="/groups", tags=["groups"])


def _member_info(user: User) -> MemberInfo:
    return MemberInfo(id=user.id, name=user.name, email=user.email)


def _group_response(group: Group) -> GroupResponse:
    return GroupResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        created_at=group.created_at,
        member_ids=[u.id for u in group.members],
        members=[_member_info(u) for u in group.members],
    )


@router.get("", response_model=list[GroupResponse])
def list_groups(db: Session = Depends(get_db)):
    return [_group_response(g) for g in db.query(Group).order_by(Group.id).all()]


@router.post("", response_model=GroupResponse, status_code=201)
def create_group(data: GroupCreate, db: Session = Depends(get_db)):
    members = []
    if data.member_ids:
        found = {u.id: u for u in db.query(User).filter(User.id.in_(data.member_ids)).all()}
        missing = [uid for uid in data.member_ids if uid not in found]
        if missing:
            raise HTTPException(status_code=400, detail=f"Unknown user id(s): {missing}")
        for uid in data.member_ids:
            if found[uid] not in members:
                members.append(found[uid])
    group = Group(name=data.name, description=data.description)
    group.members = members
    db.add(group)
    db.commit()
    db.refresh(group)
    return _group_response(group)


@router.get("/{group_id}", response_model=GroupResponse)
def get_group_by_id(group_id: int, db: Session = Depends(get_db)):
    return _group_response(get_group(db, group_id))


@router.patch("/{group_id}", response_model=GroupResponse)
def update_group(group_id: int, data: GroupUpdate, db: Session = Depends(get_db)):
    group = get_group(db, group_id)
    if data.name is not None:
        group.name = data.name
    if data.description is not None:
        group.description = data.description
    db.commit()
    db.refresh(group)
    return _group_response(group)


@router.delete("/{group_id}", status_code=204)
def delete_group(group_id: int, db: Session = Depends(get_db)):
    with group_scope(group_id):
        group = get_group(db, group_id)
        db.delete(group)
        db.commit()


@router.post("/{group_id}/members/{user_id}", response_model=MessageResponse)
def add_group_member(group_id: int, user_id: int, db: Session = Depends(get_db)):
    with group_scope(group_id):
        group = get_group(db, group_id)
        user = get_user(db, user_id)
        if user in group.members:
            raise HTTPException(status_code=400, detail="User already in group")
        group.members.append(user)
        db.commit()
    return MessageResponse(message="Member added successfully")


@router.delete("/{group_id}/members/{user_id}", response_model=MessageResponse)
def remove_group_member(group_id: int, user_id: int, db: Session = Depends(get_db)):
    with group_scope(group_id):
        group = get_group(db, group_id)
        user = next((m for m in group.members if m.id == user_id), None)
        if not user:
            raise HTTPException(status_code=404, detail="User not in this group")
        balance = next(b.net_balance for b in ledger.balances_for(db, group) if b.user_id == user_id)
        if not is_zero(balance):
            raise HTTPException(status_code=400, detail="Member has an outstanding balance")
        group.members.remove(user)
        db.commit()
    return MessageResponse(message="Member removed successfully")
