"""Display helpers shared by the listing, search and player views."""
import math
from datetime import datetime
from typing import Optional


def format_number(num) -> str:
    if num is None:
        return "0"
    try:
        number = float(num)
    except (TypeError, ValueError):
        return "0"
    if math.isnan(number) or math.isinf(number):
        return "0"
    return f"{round(number):,}"


def format_duration(seconds) -> str:
    """Seconds to MM:SS, or HH:MM:SS from one hour up."""
    try:
        secs = int(float(seconds or 0))
    except (TypeError, ValueError):
        return "00:00"
    if secs <= 0:
        return "00:00"
    hours, rest = divmod(secs, 3600)
    minutes, remaining = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{remaining:02d}"
    return f"{minutes:02d}:{remaining:02d}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def parse_date(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    # compare naive local times
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_date(value, now: Optional[datetime] = None) -> str:
    """Relative wording for an upload date: "3 days ago", "Yesterday", ..."""
    if not value:
        return "Unknown date"
    moment = parse_date(str(value))
    if moment is None:
        return "Invalid date"

    now = now or datetime.now()
    seconds = math.floor((now - moment).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24
    weeks = days // 7
    months = days // 30
    years = days // 365

    if seconds < 60:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if weeks < 4:
        return _plural(weeks, "week")
    if months < 12:
        return _plural(months, "month")
    return _plural(years, "year")


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    i = min(int(math.floor(math.log(size, 1024))), len(units) - 1)
    value = round(size / 1024 ** i, 2)
    return f"{value:g} {units[i]}"


def truncate_text(text: Optional[str], max_length: int, ellipsis: str = "...") -> Optional[str]:
    if not text or len(text) <= max_length:
        return text
    return text[: max_length - len(ellipsis)] + ellipsis


def slugify(name: str) -> str:
    return (name or "").replace(" ", "-").lower()
