"""
Todo Dependency Graph
=====================

Tasks with durations and due dates, linked by precedence edges.

Available modules:
- domain.todo: the Todo record
- services.dependency_graph: TodoGraph, the acyclic graph engine
- utils.graph: earliest start and critical path algorithms
- utils.formatters: date and number helpers
"""

from tododag.domain.todo import Todo, TodoError, order_by_due_date
from tododag.services.dependency_graph import TodoGraph, GraphInvariantError

__all__ = [
    "Todo",
    "TodoError",
    "order_by_due_date",
    "TodoGraph",
    "GraphInvariantError",
]
