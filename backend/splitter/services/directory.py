"""Read-side lookups into users and groups. The ledger never writes through here."""
from sqlalchemy.orm import Session

from splitter.errors import NotFoundError
from splitter.models import Group, User


def get_group(db: Session, group_id: int) -> Group:
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def member_ids(group: Group) -> list[int]:
    return [m.id for m in group.members]
