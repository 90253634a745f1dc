# vardump/refs.py
"""Reference ids for cycle-safe rendering."""

from typing import Any, Dict, List, Optional


class ReferenceTracker:
    """Assigns sequential ids to objects in first-visit order.

    One tracker lives for exactly one render pass. Ids start at 1 and are
    never reused, even after the traversal leaves the subtree an object
    was first seen in. The tracker holds a reference to every registered
    object so that ``id()`` values stay unique for the whole pass.
    """

    def __init__(self):
        self._next_id = 1
        self._seen: Dict[int, int] = {}
        self._alive: List[Any] = []

    def lookup(self, obj: Any) -> Optional[int]:
        """Return the id assigned to ``obj``, or None if not seen yet."""
        return self._seen.get(id(obj))

    def register(self, obj: Any) -> int:
        """Assign the next id to ``obj`` and return it.

        Registering an already-known object returns its existing id.
        """
        key = id(obj)
        ref_id = self._seen.get(key)
        if ref_id is not None:
            return ref_id
        ref_id = self._next_id
        self._seen[key] = ref_id
        self._alive.append(obj)
        self._next_id += 1
        return ref_id
