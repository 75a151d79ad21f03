"""
Raw records handed over by the upstream source clients.

The ticket-system client produces TicketRecord values and the feature-board
client produces FeatureRequestRecord values. Fetching, pagination and auth
live in those clients; this module only fixes the shape. `from_dict` is
total: missing or null fields degrade to empty values instead of raising.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO string or epoch seconds into an aware datetime.

    Naive values are taken as UTC. Unparseable values return None.
    """
    if value is None or value == "":
        return None

    parsed = None
    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            parsed = datetime.fromtimestamp(value, tz=timezone.utc)
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
    except (ValueError, TypeError, OverflowError, OSError):
        return None

    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return max(int(value), 0)
    except (ValueError, TypeError):
        return 0


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [_as_str(item) for item in value if item is not None]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class TicketRecord:
    """A support conversation (reactive signal)."""

    id: str
    subject: str = ""
    preview: str = ""
    customer_messages: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    thread_count: int = 0
    customer_email: str = ""
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    number: Optional[int] = None
    status: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TicketRecord":
        """Build from a client payload.

        Tags may be plain strings or {"tag": name} objects.
        """
        tags = []
        for tag in d.get("tags") or []:
            if isinstance(tag, dict):
                tag = tag.get("tag") or tag.get("name")
            if tag:
                tags.append(_as_str(tag))

        number = d.get("number")
        return cls(
            id=_as_str(d.get("id")),
            subject=_as_str(d.get("subject")),
            preview=_as_str(d.get("preview")),
            customer_messages=_as_str_list(d.get("customer_messages")),
            tags=tags,
            thread_count=_as_int(d.get("thread_count")),
            customer_email=_as_str(d.get("customer_email")),
            created_at=parse_timestamp(d.get("created_at")),
            closed_at=parse_timestamp(d.get("closed_at")),
            number=_as_int(number) if number is not None else None,
            status=_as_str(d.get("status")),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["created_at"] = _iso(self.created_at)
        d["closed_at"] = _iso(self.closed_at)
        return d


@dataclass
class FeatureComment:
    """A comment on a feature-board post."""

    comment: str = ""
    author: str = ""
    role: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FeatureComment":
        author = d.get("author")
        role = d.get("role")
        if isinstance(author, dict):
            role = role or author.get("role")
            author = author.get("name")
        return cls(
            comment=_as_str(d.get("comment")),
            author=_as_str(author),
            role=_as_str(role),
            created_at=parse_timestamp(d.get("created_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["created_at"] = _iso(self.created_at)
        return d


@dataclass
class FeatureRequestRecord:
    """A feature-board post (proactive signal)."""

    id: str
    title: str = ""
    description: str = ""
    votes_count: int = 0
    comments_count: int = 0
    comments: List[FeatureComment] = field(default_factory=list)
    portal: str = ""
    status: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FeatureRequestRecord":
        """Build from a client payload.

        Status and category may be plain strings or {"name": ...} objects.
        """
        def _named(value: Any) -> Optional[str]:
            if isinstance(value, dict):
                value = value.get("name")
            return _as_str(value) if value else None

        comments = [
            FeatureComment.from_dict(c)
            for c in d.get("comments") or []
            if isinstance(c, dict)
        ]
        return cls(
            id=_as_str(d.get("id")),
            title=_as_str(d.get("title")),
            description=_as_str(d.get("description")),
            votes_count=_as_int(d.get("votes_count")),
            comments_count=_as_int(d.get("comments_count")),
            comments=comments,
            portal=_as_str(d.get("portal")),
            status=_named(d.get("status")),
            category=_named(d.get("category")),
            created_at=parse_timestamp(d.get("created_at")),
            updated_at=parse_timestamp(d.get("updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["created_at"] = _iso(self.created_at)
        d["updated_at"] = _iso(self.updated_at)
        d["comments"] = [c.to_dict() for c in self.comments]
        return d
