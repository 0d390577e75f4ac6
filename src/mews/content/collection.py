"""Content collections — directory listings with a "most recent" query."""

from __future__ import annotations

from datetime import UTC, datetime

from mews._errors import ContentError
from mews.content.store import Content


def _parse_date(value: str, record: Content, by: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        msg = (
            f"Field {by!r} of {record.relative_path!r} is not an ISO date: "
            f"{value!r}"
        )
        raise ContentError(msg) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class ContentCollection(list[Content]):
    """Ordered group of Content records, as returned by ``content(dir)``."""

    def most_recent(self, n: int = 0, by: str = "date") -> ContentCollection:
        """Return the *n* newest records, sorted descending by field *by*.

        The field is parsed as an ISO-8601 date.  Records without the field
        count as "now", so they sort ahead of anything dated in the past.
        ``n <= 0`` returns every record.

        Records are not modified.

        Raises:
            ContentError: If a present field is not a parseable date.

        """
        now = datetime.now(UTC)

        def sort_key(record: Content) -> datetime:
            value = record.get(by)
            if not value:
                return now
            return _parse_date(value, record, by)

        ordered = sorted(self, key=sort_key, reverse=True)
        if n <= 0:
            n = len(ordered)
        return ContentCollection(ordered[:n])
