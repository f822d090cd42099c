"""
Task Models
Model definitions for tasks and authenticated accounts
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
from dataclasses import dataclass

from pydantic import TypeAdapter

_TIMESTAMP = TypeAdapter(datetime)


def parse_timestamp(value: Any) -> datetime:
    """Parse a PostgREST timestamp (ISO 8601, any fraction precision, optional Z)"""
    parsed = _TIMESTAMP.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Task:
    """Task row owned by exactly one account"""
    id: str
    title: str
    description: Optional[str]
    completed: bool
    user_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Task":
        """Build from a `tasks` table row"""
        return cls(
            id=str(row['id']),
            title=row['title'],
            description=row.get('description'),
            completed=bool(row.get('completed', False)),
            user_id=str(row['user_id']),
            created_at=parse_timestamp(row['created_at']),
            updated_at=parse_timestamp(row['updated_at'])
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'completed': self.completed,
            'user_id': self.user_id,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }


@dataclass
class AuthUser:
    """Authenticated account"""
    id: str
    email: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'email': self.email}


@dataclass
class AuthSession:
    """Session tokens issued by Supabase Auth"""
    access_token: str
    refresh_token: str
    user: AuthUser
    expires_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': self.expires_at,
            'user': self.user.to_dict()
        }
