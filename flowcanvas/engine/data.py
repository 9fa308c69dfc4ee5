#!/usr/bin/env python3
"""
Data management for workflow runs.

Holds the aggregate result map of a run and builds each node's input from
the results of its upstream nodes.
"""
from typing import Any, Dict, Iterable, List

from flowcanvas.engine.resolver import DependencyResolver


def merge_inputs(results: Iterable[Any]) -> Any:
    """
    Merge upstream results into one input value.

    Mappings are shallow-merged in order, later sources overwriting earlier
    ones on the same key. A value that is not a mapping cannot be merged and
    replaces whatever was accumulated so far; None contributes nothing.

    Args:
        results: Upstream results in incoming-edge order

    Returns:
        Merged input
    """
    merged: Any = {}
    for result in results:
        if result is None:
            continue
        if isinstance(result, dict):
            if isinstance(merged, dict):
                merged = {**merged, **result}
            else:
                merged = dict(result)
        else:
            merged = result
    return merged


class DataManager:
    """Manages data flow between nodes during one run"""

    def __init__(self, resolver: DependencyResolver):
        self.resolver = resolver
        self._node_results: Dict[str, Any] = {}

    def set_node_result(self, node_id: str, result: Any):
        """Store the result of an executed node"""
        self._node_results[node_id] = result

    @property
    def node_results(self) -> Dict[str, Any]:
        return dict(self._node_results)

    def resolve_node_input(self, node_id: str) -> Any:
        """
        Build a node's input from its upstream results.

        Returns:
            None when the node has no incoming edges, otherwise the merge of
            its sources' results in incoming-edge order
        """
        sources: List[str] = self.resolver.incoming_of(node_id)
        if not sources:
            return None
        return merge_inputs(self._node_results.get(source) for source in sources)

    def clear(self):
        self._node_results.clear()
