from datetime import date, datetime
from typing import List, Dict, Any, Optional, Union

from ..utils.formatters import remove_time, is_overdue


class TodoError(Exception):
    """Exception raised for errors in the Todo class."""

    pass


def _check_duration(duration) -> int:
    if duration is None:
        return 0
    if not isinstance(duration, int) or isinstance(duration, bool) or duration < 0:
        raise TodoError("Duration must be a non-negative integer")
    return duration


class Todo:
    """
    Represents a todo in the dependency graph.

    A todo carries a duration in hours, an optional due date and the
    earliest start computed by the graph it belongs to. Dependencies are
    not stored on the todo; the graph owns them.
    """

    def __init__(
        self,
        id: int,
        title: str,
        duration: Optional[int] = 0,
        due_date: Optional[Union[str, date, datetime]] = None,
        image_url: str = "",
    ):
        """
        Initialize a new Todo.

        Args:
            id: Unique integer identifier (assigned by the caller)
            title: Display title, surrounding whitespace is removed
            duration: Estimated duration in hours, defaults to 0
            due_date: Due date as ISO string, date or datetime, or None
            image_url: URL of the image shown next to the todo

        Raises:
            TodoError: If any input validation fails
        """
        if not isinstance(id, int) or isinstance(id, bool):
            raise TodoError("Todo ID must be an integer")
        self.id = id

        if not isinstance(title, str) or not title.strip():
            raise TodoError("Todo title must be a non-empty string")
        self.title = title.strip()

        self._duration = _check_duration(duration)

        self.due_date = self._normalize_due_date(due_date)
        self.image_url = image_url or ""

        # Computed by the dependency graph
        self._earliest_start = 0

    @staticmethod
    def _normalize_due_date(value) -> str:
        """Convert a due date to YYYY-MM-DD, or "" when there is none."""
        if value is None or value == "":
            return ""
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str):
            day = remove_time(value.strip())
            try:
                return date.fromisoformat(day).isoformat()
            except ValueError:
                raise TodoError(f"Invalid due date: {value}")
        raise TodoError("Due date must be a string, date or datetime")

    @property
    def duration(self) -> int:
        """Duration in hours. Change it through TodoGraph.set_duration."""
        return self._duration

    def _set_duration(self, hours) -> None:
        self._duration = _check_duration(hours)

    @property
    def earliest_start(self) -> int:
        """Earliest start in hours, as last computed by the graph."""
        return self._earliest_start

    def _set_earliest_start(self, hours: int) -> None:
        self._earliest_start = hours

    def is_overdue(self, today: Optional[Union[date, datetime]] = None) -> bool:
        """Check whether the due date has passed."""
        return is_overdue(self.due_date, today)

    @classmethod
    def from_schema(cls, record: Dict[str, Any]) -> "Todo":
        """
        Build a Todo from a plain record.

        Records coming from bulk loads may omit the title; the todo is then
        named after its ID.

        Args:
            record: Mapping with id, title, duration, dueDate and imageUrl keys

        Returns:
            Todo: The new todo

        Raises:
            TodoError: If the record is missing required fields or is invalid
        """
        if not isinstance(record, dict):
            raise TodoError("Todo record must be a dictionary")
        if "id" not in record:
            raise TodoError("Todo record has no id")

        title = record.get("title")
        if title is None or (isinstance(title, str) and not title.strip()):
            title = f"Todo {record['id']}"

        return cls(
            id=record["id"],
            title=title,
            duration=record.get("duration", 0),
            due_date=record.get("dueDate"),
            image_url=record.get("imageUrl") or "",
        )

    def to_schema(self) -> Dict[str, Any]:
        """
        Convert the todo back to a plain record.

        Dependencies are left empty since the graph owns them.
        """
        return {
            "id": self.id,
            "title": self.title,
            "dueDate": self.due_date or None,
            "imageUrl": self.image_url,
            "duration": self.duration,
            "dependencies": [],
        }

    def __repr__(self):
        return (
            f"Todo(id={self.id!r}, title={self.title!r}, duration={self.duration}, "
            f"earliest_start={self._earliest_start})"
        )


def order_by_due_date(todos: List[Todo]) -> List[Todo]:
    """
    Order todos for display.

    Todos without a due date come first in their given order, followed by
    the rest sorted by due date.
    """
    without_due_date = [todo for todo in todos if not todo.due_date]
    with_due_date = sorted(
        (todo for todo in todos if todo.due_date), key=lambda todo: todo.due_date
    )
    return without_due_date + with_due_date
