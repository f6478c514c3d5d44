import logging

import networkx as nx

from ..domain.todo import Todo, TodoError, order_by_due_date
from ..utils.graph import find_ancestors, forward_pass, find_critical_path

logger = logging.getLogger(__name__)


class GraphInvariantError(Exception):
    """Exception raised when the dependency graph is found in an inconsistent state."""

    pass


class TodoGraph:
    """
    Directed acyclic graph of todos and their precedence edges.

    An edge ``prerequisite -> dependent`` means the prerequisite must finish
    before the dependent may start. Forward adjacency is the graph's
    successors, reverse adjacency its predecessors; networkx keeps the two
    mirrored.

    Every successful structural change clears the safe target cache and
    recomputes earliest starts before returning, so reads never see stale
    values. Not-found and would-create-cycle outcomes are reported through
    return values, never raised.

    Not thread-safe: guard the whole object with one lock if it is shared.
    """

    def __init__(self, todos=None):
        self._graph = nx.DiGraph()
        self._todos = {}  # Todo ID -> Todo
        self._safe_targets_cache = {}  # Prerequisite ID -> frozenset of IDs

        if todos:
            for todo in todos:
                self._check_todo(todo)
                if todo.id in self._todos:
                    logger.warning(f"Duplicate todo {todo.id}, keeping the first")
                    continue
                self._insert_todo(todo)
            self.recompute_earliest_starts()

    # Lifecycle

    @staticmethod
    def _prerequisite_ids(record):
        """Validated prerequisite IDs of a record ("dependencies" or "prerequisiteIds")."""
        prereq_ids = record.get("dependencies", record.get("prerequisiteIds"))
        if prereq_ids is None:
            return []
        if not isinstance(prereq_ids, (list, tuple)):
            raise TodoError(
                f"Dependencies of todo {record['id']} must be a list of todo IDs"
            )
        for prereq_id in prereq_ids:
            if not isinstance(prereq_id, int) or isinstance(prereq_id, bool):
                raise TodoError(
                    f"Invalid dependency {prereq_id!r} on todo {record['id']}"
                )
        return list(prereq_ids)

    def initialize(self, records):
        """
        Replace the whole graph with the given todo records.

        Todos are inserted first, then every declared prerequisite is added
        through the cycle guard, then earliest starts are computed once.
        Prerequisites that are unknown or would close a cycle are skipped.
        When an ID appears twice the first record wins, dependencies included.

        Every record is validated before the current graph is touched, so a
        failed load leaves it unchanged.

        Args:
            records: Iterable of mappings with id, title, duration, dueDate,
                imageUrl and dependencies (or prerequisiteIds) keys

        Returns:
            list: (prerequisite, dependent) pairs that were skipped

        Raises:
            TodoError: If a record cannot be turned into a Todo or its
                dependencies are not a list of integer IDs
        """
        loaded = []
        for record in records:
            todo = Todo.from_schema(record)
            loaded.append((todo, self._prerequisite_ids(record)))

        self._graph = nx.DiGraph()
        self._todos = {}
        self._invalidate()

        accepted = []
        for todo, prereq_ids in loaded:
            if todo.id in self._todos:
                logger.warning(f"Duplicate todo {todo.id} in input, keeping the first")
                continue
            self._insert_todo(todo)
            accepted.append((todo.id, prereq_ids))

        skipped = []
        for todo_id, prereq_ids in accepted:
            for prereq_id in prereq_ids:
                if not self._link(prereq_id, todo_id):
                    skipped.append((prereq_id, todo_id))

        if skipped:
            logger.warning(f"Skipped {len(skipped)} invalid dependencies: {skipped}")

        self.recompute_earliest_starts()
        logger.debug(
            f"Initialized graph with {self.num_tasks} todos and "
            f"{self._graph.number_of_edges()} dependencies"
        )
        return skipped

    # Graph store

    @staticmethod
    def _check_todo(todo):
        if not isinstance(todo, Todo):
            raise TodoError("Only Todo objects can be added to the graph")

    def _insert_todo(self, todo):
        self._todos[todo.id] = todo
        self._graph.add_node(todo.id)

    def add_task(self, todo):
        """
        Add a todo with no dependencies.

        Returns:
            bool: True if added, False if a todo with the same ID exists

        Raises:
            TodoError: If ``todo`` is not a Todo
        """
        self._check_todo(todo)
        if todo.id in self._todos:
            logger.info(f"Todo {todo.id} already exists, leaving it untouched")
            return False

        self._insert_todo(todo)
        self._invalidate()
        self.recompute_earliest_starts()
        return True

    def remove_task(self, todo_id):
        """
        Remove a todo together with every edge touching it.

        Returns:
            bool: True if removed, False if the todo was not found
        """
        if todo_id not in self._todos:
            logger.warning(f"Todo with id {todo_id} not found")
            return False

        self._graph.remove_node(todo_id)
        del self._todos[todo_id]
        self._invalidate()
        self.recompute_earliest_starts()
        return True

    def get_task(self, todo_id):
        """Return the todo with the given ID, or None."""
        return self._todos.get(todo_id)

    def get_tasks(self, todo_ids):
        """Return the todos for the given IDs, skipping unknown ones."""
        return [self._todos[i] for i in todo_ids if i in self._todos]

    @property
    def all_task_ids(self):
        return list(self._todos)

    @property
    def num_tasks(self):
        return len(self._todos)

    def __len__(self):
        return len(self._todos)

    def __contains__(self, todo_id):
        return todo_id in self._todos

    def prerequisites_of(self, todo_id):
        """IDs of the todos that must finish before this one (a copy)."""
        if todo_id not in self._graph:
            return set()
        return set(self._graph.predecessors(todo_id))

    def dependents_of(self, todo_id):
        """IDs of the todos waiting on this one (a copy)."""
        if todo_id not in self._graph:
            return set()
        return set(self._graph.successors(todo_id))

    def ordered_dependents(self, todo_id):
        """Dependent todos ordered for display: undated first, then by due date."""
        if todo_id not in self._graph:
            return []
        return order_by_due_date(self.get_tasks(self._graph.successors(todo_id)))

    def root_tasks(self):
        """IDs of todos without prerequisites, in insertion order."""
        return [
            todo_id for todo_id in self._todos if self._graph.in_degree(todo_id) == 0
        ]

    def has_edge(self, prerequisite, dependent):
        return self._graph.has_edge(prerequisite, dependent)

    def set_duration(self, todo_id, duration):
        """
        Change a todo's duration and refresh the weights of its outgoing edges.

        Returns:
            bool: True if updated, False if the todo was not found

        Raises:
            TodoError: If the duration is not a non-negative integer
        """
        todo = self._todos.get(todo_id)
        if todo is None:
            logger.warning(f"Todo with id {todo_id} not found")
            return False
        todo._set_duration(duration)
        for _, _, attrs in self._graph.out_edges(todo_id, data=True):
            attrs["weight"] = todo.duration
        self.recompute_earliest_starts()
        return True

    # Cycle guard

    def safe_targets(self, prerequisite):
        """
        IDs of todos that may be made dependent on ``prerequisite``.

        Everything except the prerequisite itself and its ancestors; adding
        an edge to an ancestor would close a loop. Cached per prerequisite
        until the next structural change.

        Returns:
            set: Safe target IDs (empty if the prerequisite is unknown)
        """
        if prerequisite not in self._todos:
            return set()

        cached = self._safe_targets_cache.get(prerequisite)
        if cached is None:
            excluded = find_ancestors(self._graph, prerequisite)
            excluded.add(prerequisite)
            cached = frozenset(i for i in self._todos if i not in excluded)
            self._safe_targets_cache[prerequisite] = cached

        return set(cached)

    def can_add_edge(self, prerequisite, dependent):
        """Check whether ``prerequisite -> dependent`` keeps the graph acyclic."""
        return dependent in self.safe_targets(prerequisite)

    def _link(self, prerequisite, dependent):
        """Add an edge through the cycle guard without recomputing."""
        if prerequisite not in self._todos or dependent not in self._todos:
            logger.warning(
                f"Cannot link {prerequisite} -> {dependent}: todo not found"
            )
            return False
        if self._graph.has_edge(prerequisite, dependent):
            return True
        if not self.can_add_edge(prerequisite, dependent):
            logger.info(
                f"Dependency {prerequisite} -> {dependent} would create a cycle"
            )
            return False

        self._graph.add_edge(
            prerequisite, dependent, weight=self._todos[prerequisite].duration
        )
        self._invalidate()
        return True

    def add_edge(self, prerequisite, dependent):
        """
        Make ``dependent`` wait for ``prerequisite``.

        Returns:
            bool: True if the edge exists afterwards, False if an endpoint is
            unknown or the edge would create a cycle
        """
        if self._graph.has_edge(prerequisite, dependent):
            return True
        if not self._link(prerequisite, dependent):
            return False
        self.recompute_earliest_starts()
        return True

    def remove_edge(self, prerequisite, dependent):
        """
        Drop the edge ``prerequisite -> dependent``.

        Returns:
            bool: True if removed, False if no such edge exists
        """
        if not self._graph.has_edge(prerequisite, dependent):
            logger.warning(f"Dependency {prerequisite} -> {dependent} not found")
            return False

        self._graph.remove_edge(prerequisite, dependent)
        self._invalidate()
        self.recompute_earliest_starts()
        return True

    def _invalidate(self):
        self._safe_targets_cache.clear()

    # Scheduler

    def recompute_earliest_starts(self):
        """Recompute and store the earliest start of every todo."""
        durations = {todo_id: todo.duration for todo_id, todo in self._todos.items()}
        earliest = forward_pass(self._graph, durations)
        for todo_id, hours in earliest.items():
            self._todos[todo_id]._set_earliest_start(hours)
        logger.debug(f"Recomputed earliest starts for {len(earliest)} todos")

    def earliest_start(self, todo_id):
        """Earliest start in hours, or None if the todo is unknown."""
        todo = self._todos.get(todo_id)
        return todo.earliest_start if todo is not None else None

    # Critical path

    def critical_path_from(self, root):
        """
        Longest chain of dependent todos starting at ``root``.

        Ties go to the dependent whose edge was added first.

        Returns:
            list: Todo IDs from root to a todo with no dependents, or [] if
            root is unknown
        """
        return find_critical_path(self._graph, root)[1]

    def critical_path_weight(self, root):
        """Total hours of gating work along the critical path from ``root``."""
        return find_critical_path(self._graph, root)[0]

    # Export and diagnostics

    def to_schema(self):
        """Plain records for every todo, with current prerequisite IDs."""
        records = []
        for todo_id, todo in self._todos.items():
            record = todo.to_schema()
            record["dependencies"] = list(self._graph.predecessors(todo_id))
            records.append(record)
        return records

    def describe(self):
        """Return (and log at DEBUG) a dump of both adjacency directions."""
        lines = ["Adjacency (edges):"]
        for node in self._graph.nodes():
            targets = ", ".join(
                f"{succ}(w:{attrs.get('weight', 0)})"
                for succ, attrs in self._graph.adj[node].items()
            )
            lines.append(f"  {node} -> [{targets}]")

        lines.append("Reverse adjacency (incoming edges):")
        for node in self._graph.nodes():
            sources = ", ".join(str(p) for p in self._graph.predecessors(node))
            lines.append(f"  {node} <- [{sources}]")

        lines.append("Todos:")
        for todo_id, todo in self._todos.items():
            lines.append(
                f'  ID:{todo_id} Title:"{todo.title}" '
                f"Earliest:{todo.earliest_start}h"
            )
        lines.append(
            f"Total nodes: {self._graph.number_of_nodes()}, "
            f"total edges: {self._graph.number_of_edges()}"
        )

        dump = "\n".join(lines)
        logger.debug(dump)
        return dump

    def check_invariants(self):
        """
        Verify the structural invariants of the graph.

        Raises:
            GraphInvariantError: On unknown endpoints, diverging adjacency
                mirrors, stale edge weights or a cycle
        """
        if set(self._graph.nodes()) != set(self._todos):
            raise GraphInvariantError("Graph nodes and todos differ")

        for u, v, attrs in self._graph.edges(data=True):
            if u not in self._graph.pred[v] or v not in self._graph.succ[u]:
                raise GraphInvariantError(f"Adjacency mirror broken for {u} -> {v}")
            if attrs.get("weight") != self._todos[u].duration:
                raise GraphInvariantError(f"Stale weight on edge {u} -> {v}")

        if not nx.is_directed_acyclic_graph(self._graph):
            raise GraphInvariantError("Todo dependencies contain cycles!")
