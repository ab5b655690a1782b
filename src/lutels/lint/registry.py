"""Per-document index of quick fixes, looked up by range intersection."""

from __future__ import annotations

from collections.abc import Sequence

from lsprotocol import types as lsp

from lutels.lint.models import StoredAction, ranges_intersect


class ActionRegistry:
    """Quick fixes from the last published lint cycle, keyed by document URI.

    Writes replace a document's entry wholesale; reads never mutate and never
    run the linter.
    """

    def __init__(self) -> None:
        self._actions: dict[str, list[StoredAction]] = {}

    def publish(self, uri: str, actions: Sequence[StoredAction]) -> None:
        """Replace the entry for ``uri``. An empty sequence removes it."""
        if actions:
            self._actions[uri] = list(actions)
        else:
            self._actions.pop(uri, None)

    def clear(self, uri: str) -> None:
        self._actions.pop(uri, None)

    def query(self, uri: str, range: lsp.Range) -> list[lsp.CodeAction]:
        """Actions whose anchor intersects ``range``, in insertion order."""
        stored = self._actions.get(uri)
        if not stored:
            return []
        return [s.action for s in stored if ranges_intersect(s.anchor, range)]

    def __contains__(self, uri: object) -> bool:
        return uri in self._actions

    def __len__(self) -> int:
        return len(self._actions)
