"""Repository for RefreshNotificationSetting data access."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from bookmyenv.models.refresh_notification import RefreshNotificationSetting, ScopeType
from bookmyenv.schemas.notification_setting import (
    NotificationSettingCreate,
    NotificationSettingUpdate,
)


class NotificationSettingRepository:
    """Repository for RefreshNotificationSetting model."""

    def __init__(self, db: Session):
        self.db = db

    def get_for_entity(self, entity_type: str, entity_id: UUID) -> list[RefreshNotificationSetting]:
        return (
            self.db.query(RefreshNotificationSetting)
            .filter(
                RefreshNotificationSetting.scope_type == ScopeType.ENTITY.value,
                RefreshNotificationSetting.entity_type == entity_type,
                RefreshNotificationSetting.entity_id == entity_id,
            )
            .order_by(RefreshNotificationSetting.created_at)
            .all()
        )

    def get_for_groups(self, group_ids: Iterable[UUID | str]) -> list[RefreshNotificationSetting]:
        ids = [UUID(str(group_id)) for group_id in group_ids]
        if not ids:
            return []
        return (
            self.db.query(RefreshNotificationSetting)
            .filter(
                RefreshNotificationSetting.scope_type == ScopeType.GROUP.value,
                RefreshNotificationSetting.group_id.in_(ids),
            )
            .order_by(RefreshNotificationSetting.created_at)
            .all()
        )

    def get_global(self) -> list[RefreshNotificationSetting]:
        return (
            self.db.query(RefreshNotificationSetting)
            .filter(RefreshNotificationSetting.scope_type == ScopeType.GLOBAL.value)
            .order_by(RefreshNotificationSetting.created_at)
            .all()
        )

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        scope_type: str | None = None,
    ) -> list[RefreshNotificationSetting]:
        query = self.db.query(RefreshNotificationSetting)
        if scope_type is not None:
            query = query.filter(RefreshNotificationSetting.scope_type == scope_type)
        return (
            query.order_by(RefreshNotificationSetting.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_id(self, setting_id: UUID) -> RefreshNotificationSetting | None:
        return (
            self.db.query(RefreshNotificationSetting)
            .filter(RefreshNotificationSetting.id == setting_id)
            .first()
        )

    def create(self, data: NotificationSettingCreate) -> RefreshNotificationSetting:
        setting = RefreshNotificationSetting(**data.model_dump(mode="json"))
        self.db.add(setting)
        self.db.commit()
        self.db.refresh(setting)
        return setting

    def update(
        self, setting_id: UUID, data: NotificationSettingUpdate
    ) -> RefreshNotificationSetting | None:
        setting = self.get_by_id(setting_id)
        if not setting:
            return None

        update_data = data.model_dump(mode="json", exclude_unset=True)
        for key, value in update_data.items():
            setattr(setting, key, value)

        self.db.commit()
        self.db.refresh(setting)
        return setting

    def delete(self, setting_id: UUID) -> bool:
        setting = self.get_by_id(setting_id)
        if not setting:
            return False

        self.db.delete(setting)
        self.db.commit()
        return True
