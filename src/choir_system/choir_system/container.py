from __future__ import annotations

from dataclasses import dataclass

from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .contributions.mysql_contribution_repository import MySQLContributionRepository
from .contributions.service import ContributionService
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.service import EventService
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.service import PermissionService
from .songs.mysql_song_repository import MySQLSongRepository
from .songs.service import SongService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    permission_service: PermissionService
    event_service: EventService
    attendance_service: AttendanceService
    song_service: SongService
    announcement_service: AnnouncementService
    contribution_service: ContributionService


def build_services(
    *,
    users_repo,
    permissions_repo,
    events_repo,
    attendance_repo,
    songs_repo,
    announcements_repo,
    contributions_repo,
    tokens: TokenService,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, fakes in tests)."""
    permission_service = PermissionService(permissions_repo)
    return Container(
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo, tokens),
        permission_service=permission_service,
        event_service=EventService(events_repo, attendance_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, events_repo, permission_service),
        song_service=SongService(songs_repo),
        announcement_service=AnnouncementService(announcements_repo),
        contribution_service=ContributionService(contributions_repo, users_repo),
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        permissions_repo=MySQLPermissionRepository(conn),
        events_repo=MySQLEventRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        songs_repo=MySQLSongRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        contributions_repo=MySQLContributionRepository(conn),
        tokens=TokenService(secret_key, max_age_seconds=token_max_age_seconds),
    )
