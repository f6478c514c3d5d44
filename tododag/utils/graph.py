from collections import deque


def find_ancestors(graph, node):
    """
    Collect every todo that must finish before ``node`` may start.

    Walks reverse adjacency (predecessors) with a stack. Matches
    networkx.ancestors; the cycle guard relies on this exact walk.

    Returns:
        set: Ancestor IDs, not including ``node`` itself
    """
    if node not in graph:
        return set()

    ancestors = set()
    stack = list(graph.predecessors(node))
    while stack:
        current = stack.pop()
        if current in ancestors:
            continue
        ancestors.add(current)
        stack.extend(p for p in graph.predecessors(current) if p not in ancestors)

    return ancestors


def forward_pass(graph, durations):
    """
    Calculate the earliest start of every todo.

    Kahn's algorithm in FIFO order: a todo is released once all of its
    prerequisites have been processed, and starts no earlier than the
    latest finish among them.

    Args:
        graph: Dependency graph (prerequisite -> dependent)
        durations: Dictionary mapping todo ID to duration in hours

    Returns:
        dict: Todo ID -> earliest start in hours

    Raises:
        ValueError: If the graph contains a cycle
    """
    earliest_start = {node: 0 for node in graph.nodes()}
    remaining = {node: graph.in_degree(node) for node in graph.nodes()}

    queue = deque(node for node, count in remaining.items() if count == 0)
    processed = 0

    while queue:
        current = queue.popleft()
        processed += 1
        finish = earliest_start[current] + durations.get(current, 0)

        for dependent in graph.successors(current):
            if finish > earliest_start[dependent]:
                earliest_start[dependent] = finish
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                queue.append(dependent)

    if processed != graph.number_of_nodes():
        raise ValueError("Todo dependencies contain cycles!")

    return earliest_start


def find_critical_path(graph, root):
    """
    Find the longest weighted chain reachable forward from ``root``.

    Each edge weighs the duration of its source todo, so the weight of a
    chain is the total work that has to finish before its last todo may
    start. Subresults are memoized per todo. On ties the first dependent in
    edge insertion order wins.

    Returns:
        tuple: (weight, list of todo IDs starting at root), or (0, []) for
        an unknown root
    """
    if root not in graph:
        return 0, []

    memo = {}
    # Post-order walk with an explicit stack instead of recursion
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node in memo:
            continue

        if not expanded:
            stack.append((node, True))
            for succ in graph.successors(node):
                if succ not in memo:
                    stack.append((succ, False))
            continue

        best_weight = None
        best_child = None
        for succ, attrs in graph.adj[node].items():
            weight = attrs.get("weight", 0) + memo[succ][0]
            if best_weight is None or weight > best_weight:
                best_weight = weight
                best_child = succ

        if best_child is None:
            memo[node] = (0, None)
        else:
            memo[node] = (best_weight, best_child)

    path = [root]
    next_node = memo[root][1]
    while next_node is not None:
        path.append(next_node)
        next_node = memo[next_node][1]

    return memo[root][0], path
