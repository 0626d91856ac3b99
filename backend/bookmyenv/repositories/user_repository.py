"""Repositories for users, groups and group membership."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from bookmyenv.models.user import User, UserGroup, UserGroupMember


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        *,
        username: str,
        email: str | None = None,
        display_name: str | None = None,
        role: str = "Viewer",
        is_active: bool = True,
    ) -> User:
        user = User(
            username=username,
            email=email,
            display_name=display_name,
            role=role,
            is_active=is_active,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()


class UserGroupRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, *, name: str, description: str | None = None) -> UserGroup:
        group = UserGroup(name=name, description=description)
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group

    def add_member(self, group_id: UUID, user_id: UUID) -> UserGroupMember:
        member = UserGroupMember(group_id=group_id, user_id=user_id)
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)
        return member

    def get_member_ids(self, group_id: UUID) -> list[UUID]:
        """All member user ids, active or not."""
        rows = (
            self.db.query(UserGroupMember.user_id)
            .filter(UserGroupMember.group_id == group_id)
            .all()
        )
        return [row.user_id for row in rows]

    def get_active_members(self, group_id: UUID) -> list[User]:
        return (
            self.db.query(User)
            .join(UserGroupMember, UserGroupMember.user_id == User.id)
            .filter(
                UserGroupMember.group_id == group_id,
                User.is_active == True,  # noqa: E712
            )
            .order_by(User.username)
            .all()
        )
