import unittest
from datetime import date, datetime
from tododag.domain.todo import Todo, TodoError, order_by_due_date


class TodoTestCase(unittest.TestCase):
    """Test cases for the Todo class."""

    def setUp(self):
        self.todo = Todo(
            id=1,
            title="  Buy paint  ",
            duration=3,
            due_date="2025-04-10T12:30:00.000Z",
            image_url="http://example.com/paint.jpg",
        )

    def test_initialization(self):
        self.assertEqual(self.todo.id, 1)
        self.assertEqual(self.todo.title, "Buy paint")
        self.assertEqual(self.todo.duration, 3)
        self.assertEqual(self.todo.due_date, "2025-04-10")
        self.assertEqual(self.todo.earliest_start, 0)

    def test_initialization_validation(self):
        """Test validation during todo initialization."""
        with self.assertRaises(TodoError):
            Todo(id="1", title="String ID")

        with self.assertRaises(TodoError):
            Todo(id=True, title="Bool ID")

        with self.assertRaises(TodoError):
            Todo(id=2, title="   ")

        with self.assertRaises(TodoError):
            Todo(id=3, title="Negative", duration=-1)

        with self.assertRaises(TodoError):
            Todo(id=4, title="Fractional", duration=1.5)

        with self.assertRaises(TodoError):
            Todo(id=5, title="Bad date", due_date="next week")

        with self.assertRaises(TodoError):
            Todo(id=6, title="Bad date type", due_date=20250410)

    def test_defaults(self):
        todo = Todo(7, "Minimal", duration=None)
        self.assertEqual(todo.duration, 0)
        self.assertEqual(todo.due_date, "")
        self.assertEqual(todo.image_url, "")

    def test_due_date_types(self):
        self.assertEqual(Todo(8, "d", due_date=date(2025, 1, 2)).due_date, "2025-01-02")
        self.assertEqual(
            Todo(9, "dt", due_date=datetime(2025, 1, 2, 23, 0)).due_date, "2025-01-02"
        )
        self.assertEqual(Todo(10, "empty", due_date="").due_date, "")

    def test_earliest_start_is_read_only(self):
        with self.assertRaises(AttributeError):
            self.todo.earliest_start = 5

    def test_duration_is_read_only(self):
        """Durations only change through the graph, which keeps edge weights in step."""
        with self.assertRaises(AttributeError):
            self.todo.duration = 5
        self.assertEqual(self.todo.duration, 3)

    def test_is_overdue(self):
        self.assertTrue(self.todo.is_overdue(date(2025, 4, 11)))
        self.assertFalse(self.todo.is_overdue(date(2025, 4, 10)))
        self.assertFalse(Todo(11, "No due date").is_overdue(date(2099, 1, 1)))

    def test_schema_round_trip(self):
        record = self.todo.to_schema()
        self.assertEqual(
            record,
            {
                "id": 1,
                "title": "Buy paint",
                "dueDate": "2025-04-10",
                "imageUrl": "http://example.com/paint.jpg",
                "duration": 3,
                "dependencies": [],
            },
        )

        todo = Todo.from_schema(dict(record, dependencies=[5]))
        self.assertEqual(todo.title, "Buy paint")
        self.assertEqual(todo.due_date, "2025-04-10")

    def test_from_schema_validation(self):
        with self.assertRaises(TodoError):
            Todo.from_schema([1, "x"])
        with self.assertRaises(TodoError):
            Todo.from_schema({"title": "No id"})

        todo = Todo.from_schema({"id": 3, "title": "t", "dueDate": None, "imageUrl": None})
        self.assertEqual(todo.due_date, "")
        self.assertEqual(todo.image_url, "")
        self.assertIsNone(todo.to_schema()["dueDate"])

    def test_from_schema_default_title(self):
        self.assertEqual(Todo.from_schema({"id": 4, "duration": 2}).title, "Todo 4")
        self.assertEqual(Todo.from_schema({"id": 5, "title": "  "}).title, "Todo 5")
        with self.assertRaises(TodoError):
            Todo.from_schema({"id": 6, "title": 7})

    def test_order_by_due_date(self):
        todos = [
            Todo(1, "late", due_date="2025-06-01"),
            Todo(2, "undated"),
            Todo(3, "early", due_date="2025-01-01"),
            Todo(4, "also undated"),
        ]
        self.assertEqual([t.id for t in order_by_due_date(todos)], [2, 4, 3, 1])


if __name__ == "__main__":
    unittest.main()
