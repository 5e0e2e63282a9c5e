"""PostgreSQL implementation of IHubStore.

Every snapshot query runs in its own short-lived read session, since the
hub serves many connections outside any request scope.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Uuid, func, literal, select, tuple_, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database import normalize_uuid, translate_store_errors
from realtime.domain.value_objects import (
    AchievementUnlock,
    Alert,
    MetricsSnapshot,
    Notification,
)
from realtime.infrastructure.models import (
    AlertModel,
    ApplicationModel,
    ProfileModel,
    UserAchievementModel,
    projects_table,
)
from realtime.ports.store import IHubStore


class SqlAlchemyHubStore(IHubStore):
    """Hub store reading platform tables through SQLAlchemy."""

    def __init__(
        self,
        read_session_factory: async_sessionmaker[AsyncSession],
        write_session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            read_session_factory: Factory for snapshot sessions
            write_session_factory: Factory for alert updates (defaults to
                the read factory)
        """
        self._read_session_factory = read_session_factory
        self._write_session_factory = write_session_factory or read_session_factory

    async def get_metrics(self) -> MetricsSnapshot:
        """Aggregate profile and project counts in the database."""
        profiles_stmt = select(
            func.count(ProfileModel.id),
            func.count(ProfileModel.id).filter(ProfileModel.status == "online"),
            func.count(ProfileModel.id).filter(ProfileModel.is_verified.is_(True)),
            func.coalesce(func.sum(ProfileModel.total_xp), 0),
            func.avg(func.coalesce(ProfileModel.level, 1)),
        )
        projects_stmt = select(func.count()).select_from(projects_table)

        with translate_store_errors("hub.metrics"):
            async with self._read_session_factory() as session:
                total, online, verified, total_xp, avg_level = (
                    await session.execute(profiles_stmt)
                ).one()
                total_projects = (await session.execute(projects_stmt)).scalar_one()

        return MetricsSnapshot(
            total_profiles=int(total),
            total_projects=int(total_projects),
            online_users=int(online),
            verified_users=int(verified),
            total_xp=int(total_xp),
            avg_level=round(float(avg_level), 1) if total else 1.0,
        )

    async def list_unresolved_alerts(self, limit: int) -> list[Alert]:
        """List unresolved alerts, newest first."""
        stmt = (
            select(AlertModel)
            .where(AlertModel.is_resolved.is_not(True))
            .order_by(AlertModel.created_at.desc())
            .limit(limit)
        )
        with translate_store_errors("hub.unresolved_alerts"):
            async with self._read_session_factory() as session:
                models = (await session.execute(stmt)).scalars().all()
        return [self._to_alert(model) for model in models]

    async def list_alerts_created_after(
        self, since: datetime, limit: int, after_id: str | None = None
    ) -> list[Alert]:
        """List alerts after the ``(since, after_id)`` keyset position, oldest first."""
        if after_id is None:
            position = AlertModel.created_at > since
        else:
            position = tuple_(AlertModel.created_at, AlertModel.id) > tuple_(
                literal(since, DateTime(timezone=True)),
                literal(after_id, Uuid(as_uuid=False)),
            )
        stmt = (
            select(AlertModel)
            .where(position)
            .order_by(AlertModel.created_at.asc(), AlertModel.id.asc())
            .limit(limit)
        )
        with translate_store_errors("hub.new_alerts"):
            async with self._read_session_factory() as session:
                models = (await session.execute(stmt)).scalars().all()
        return [self._to_alert(model) for model in models]

    async def resolve_alert(self, alert_id: str, resolved_at: datetime) -> bool:
        """Mark an alert resolved.

        Returns:
            True if an unresolved alert changed state; False if the alert is
            unknown or was already resolved.
        """
        alert_id = normalize_uuid(alert_id)
        if alert_id is None:
            return False

        stmt = (
            update(AlertModel)
            .where(AlertModel.id == alert_id, AlertModel.is_resolved.is_not(True))
            .values(is_resolved=True, resolved_at=resolved_at)
        )
        with translate_store_errors("hub.resolve_alert"):
            async with self._write_session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        return result.rowcount > 0

    async def list_recent_achievement_unlocks(self, limit: int) -> list[AchievementUnlock]:
        """List the most recent unlocks across all subjects."""
        stmt = (
            select(UserAchievementModel)
            .order_by(UserAchievementModel.earned_at.desc())
            .limit(limit)
        )
        with translate_store_errors("hub.recent_achievements"):
            async with self._read_session_factory() as session:
                models = (await session.execute(stmt)).scalars().all()
        return [self._to_unlock(model) for model in models]

    async def list_achievement_unlocks_for_subject(
        self, subject_id: str, limit: int
    ) -> list[AchievementUnlock]:
        """List one subject's unlocks, newest first."""
        subject_id = normalize_uuid(subject_id)
        if subject_id is None:
            return []

        stmt = (
            select(UserAchievementModel)
            .where(UserAchievementModel.user_id == subject_id)
            .order_by(UserAchievementModel.earned_at.desc())
            .limit(limit)
        )
        with translate_store_errors("hub.subject_achievements"):
            async with self._read_session_factory() as session:
                models = (await session.execute(stmt)).scalars().all()
        return [self._to_unlock(model) for model in models]

    async def list_notifications(self, limit: int) -> list[Notification]:
        """Build the activity feed from recent applications and open alerts.

        Takes up to ``limit`` items from each source and merges them newest
        first.
        """
        applications_stmt = (
            select(ApplicationModel)
            .order_by(ApplicationModel.submitted_at.desc().nulls_last())
            .limit(limit)
        )
        alerts_stmt = (
            select(AlertModel)
            .where(AlertModel.is_resolved.is_not(True))
            .order_by(AlertModel.created_at.desc())
            .limit(limit)
        )
        with translate_store_errors("hub.notifications"):
            async with self._read_session_factory() as session:
                applications = (await session.execute(applications_stmt)).scalars().all()
                alerts = (await session.execute(alerts_stmt)).scalars().all()

        notifications = [
            Notification(
                id=str(application.id),
                type="application",
                message=f"New application from {application.full_name}",
                timestamp=application.submitted_at,
            )
            for application in applications
        ]
        notifications.extend(
            Notification(
                id=str(alert.id),
                type="alert",
                message=alert.message,
                timestamp=alert.created_at,
                severity=alert.severity,
            )
            for alert in alerts
        )
        return sorted(notifications, key=_notification_sort_key, reverse=True)

    @staticmethod
    def _to_alert(model: AlertModel) -> Alert:
        return Alert(
            id=str(model.id),
            message=model.message,
            severity=model.severity,
            created_at=model.created_at,
            is_resolved=bool(model.is_resolved),
            resolved_at=model.resolved_at,
        )

    @staticmethod
    def _to_unlock(model: UserAchievementModel) -> AchievementUnlock:
        achievement = model.achievement
        return AchievementUnlock(
            id=str(model.id),
            subject_id=str(model.user_id),
            achievement_id=str(model.achievement_id),
            name=achievement.name,
            description=achievement.description,
            xp_reward=achievement.xp_reward or 0,
            earned_at=model.earned_at,
        )


def _notification_sort_key(notification: Notification) -> float:
    if notification.timestamp is None:
        return float("-inf")
    return notification.timestamp.timestamp()
