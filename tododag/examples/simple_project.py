from datetime import datetime
from tododag.services.dependency_graph import TodoGraph
from tododag.utils.formatters import earliest_start_label


def create_sample_graph():
    records = [
        {"id": 1, "title": "Pick venue", "duration": 1, "dueDate": "2025-04-01"},
        {"id": 2, "title": "Book caterer", "duration": 2, "dependencies": [1]},
        {
            "id": 3,
            "title": "Print invitations",
            "duration": 5,
            "dueDate": "2025-04-10T09:00:00.000Z",
            "dependencies": [1],
        },
        {"id": 4, "title": "Send invitations", "duration": 1, "dependencies": [2, 3]},
        {"id": 5, "title": "Order decorations", "duration": 3},
        {"id": 6, "title": "Decorate hall", "duration": 4, "dependencies": [5]},
    ]

    graph = TodoGraph()
    graph.initialize(records)
    return graph


def print_report(graph, root=None, now=None):
    """Print roots, earliest starts and critical paths of a graph."""
    if now is None:
        now = datetime.now()

    print("Todo Dependency Report")
    print("======================")
    print(f"Todos: {graph.num_tasks}")
    print(f"Roots: {', '.join(str(i) for i in graph.root_tasks())}")

    print("\nEarliest starts:")
    for todo in graph.get_tasks(graph.all_task_ids):
        due = f" (due {todo.due_date})" if todo.due_date else ""
        overdue = " [OVERDUE]" if todo.is_overdue(now) else ""
        print(
            f"  Todo {todo.id}: {todo.title} - {todo.duration}h, "
            f"+{todo.earliest_start}h, {earliest_start_label(todo.earliest_start, now)}"
            f"{due}{overdue}"
        )

    roots = [root] if root is not None else graph.root_tasks()
    print("\nCritical paths:")
    for root_id in roots:
        path = graph.critical_path_from(root_id)
        if not path:
            print(f"  Todo {root_id} not found")
            continue
        weight = graph.critical_path_weight(root_id)
        print(f"  From {root_id}: {' -> '.join(str(i) for i in path)} ({weight}h)")


if __name__ == "__main__":
    print_report(create_sample_graph())
