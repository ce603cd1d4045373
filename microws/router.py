"""URL pattern router with static, parameter and wildcard segments."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Sequence

__all__ = ["HttpRouter", "Handler"]

Handler = Callable[["HttpRouter"], bool]

_HANDLER_MASK = 0x0FFFFFFF
_MAX_URL_SEGMENTS = 100


@dataclass(eq=False)
class _Node:
    name: str
    is_high_priority: bool = False
    children: list[_Node] = field(default_factory=list)
    handlers: list[int] = field(default_factory=list)


def _lexical_order(name: str) -> int:
    """Rank used to keep static segments before parameters before wildcards."""
    if not name:
        return 2
    if name[0] == ":":
        return 1
    if name[0] == "*":
        return 0
    return 2


def _split_url(url: str) -> list[str]:
    """Split a URL into at most ``_MAX_URL_SEGMENTS`` segments, stepping over each slash."""
    segments: list[str] = []
    rest = url
    while rest and len(segments) < _MAX_URL_SEGMENTS:
        rest = rest[1:]
        slash = rest.find("/")
        if slash == -1:
            segments.append(rest)
            rest = ""
        else:
            segments.append(rest[:slash])
            rest = rest[slash:]
    return segments


def _method_sort_key(node: _Node) -> tuple[int, str]:
    if node.name == "GET":
        return (0, node.name)
    if node.name == HttpRouter.ANY_METHOD_TOKEN:
        return (2, node.name)
    return (1, node.name)


class HttpRouter:
    """Matches a method and URL against registered patterns and runs their handlers.

    Handlers receive the router and return True when they handled the request;
    returning False lets routing continue with the next candidate.
    """

    ANY_METHOD_TOKEN = "*"
    HIGH_PRIORITY = 0xD0000000
    MEDIUM_PRIORITY = 0xE0000000
    LOW_PRIORITY = 0xF0000000

    def __init__(self) -> None:
        self.user_data: Any = None
        self._handlers: list[Handler] = []
        self._params: list[str] = []
        self._root = _Node("rootNode")
        self._get_node(self._root, self.ANY_METHOD_TOKEN, False)

    def parameters(self) -> tuple[str, ...]:
        """Parameter values matched so far by the route being executed."""
        return tuple(self._params)

    def _get_node(self, parent: _Node, child: str, is_high_priority: bool) -> _Node:
        for node in parent.children:
            if node.name == child and node.is_high_priority == is_high_priority:
                return node

        new_node = _Node(child, is_high_priority)

        def goes_before(existing: _Node) -> bool:
            if new_node.is_high_priority != existing.is_high_priority:
                return new_node.is_high_priority
            return (
                bool(existing.name)
                and parent is not self._root
                and _lexical_order(existing.name) < _lexical_order(new_node.name)
            )

        position = next(
            (i for i, existing in enumerate(parent.children) if goes_before(existing)),
            len(parent.children),
        )
        parent.children.insert(position, new_node)
        return new_node

    def _run_handlers(self, handler_ids: Iterable[int]) -> bool:
        return any(self._handlers[h & _HANDLER_MASK](self) for h in handler_ids)

    def _execute(self, parent: _Node, segments: Sequence[str], depth: int) -> bool:
        if depth >= len(segments):
            return self._run_handlers(parent.handlers)

        segment = segments[depth]
        for child in parent.children:
            if child.name.startswith("*"):
                if self._run_handlers(child.handlers):
                    return True
            elif child.name.startswith(":") and segment:
                self._params.append(segment)
                if self._execute(child, segments, depth + 1):
                    return True
                self._params.pop()
            elif child.name == segment:
                if self._execute(child, segments, depth + 1):
                    return True
        return False

    def _find_handler(self, method: str, pattern: str, priority: int) -> int | None:
        for method_node in self._root.children:
            if method_node.name != method:
                continue
            high = priority == self.HIGH_PRIORITY
            node = method_node
            for segment in _split_url(pattern):
                node = next(
                    (
                        child
                        for child in node.children
                        if (
                            (segment.startswith(":") and child.name.startswith(":"))
                            or child.name == segment
                        )
                        and child.is_high_priority == high
                    ),
                    None,
                )
                if node is None:
                    return None
            return next(
                (h for h in node.handlers if (h & ~_HANDLER_MASK) == priority),
                None,
            )
        return None

    def route(self, method: str, url: str) -> bool:
        """Run matching handlers until one reports it handled the request."""
        segments = _split_url(url)
        self._params = []

        for method_node in self._root.children:
            if method_node.name == method:
                if self._execute(method_node, segments, 0):
                    return True
                break

        if not self._root.children:
            return False
        return self._execute(self._root.children[-1], segments, 0)

    def add(
        self,
        methods: Sequence[str],
        pattern: str,
        handler: Handler,
        priority: int = MEDIUM_PRIORITY,
    ) -> None:
        """Register ``handler`` for ``pattern`` under every method, replacing an equal route."""
        if not methods:
            raise ValueError("at least one method is required")
        self.remove(methods[0], pattern, priority)

        handler_id = priority | len(self._handlers)
        high = priority == self.HIGH_PRIORITY
        for method in methods:
            node = self._get_node(self._root, method, False)
            for segment in _split_url(pattern):
                # Parameter routes are stored under the bare name ":".
                stripped = ":" if segment.startswith(":") else segment
                node = self._get_node(node, stripped, high)
            bisect.insort_right(node.handlers, handler_id)

        self._handlers.append(handler)
        self._root.children.sort(key=_method_sort_key)

    def _cull(self, parent: _Node | None, node: _Node, handler_id: int) -> bool:
        i = 0
        while i < len(node.children):
            if not self._cull(node, node.children[i], handler_id):
                i += 1

        if parent is None:
            return False

        index = handler_id & _HANDLER_MASK
        kept: list[int] = []
        for h in node.handlers:
            if (h & _HANDLER_MASK) > index:
                kept.append(((h & _HANDLER_MASK) - 1) | (h & ~_HANDLER_MASK))
            elif h != handler_id:
                kept.append(h)
        node.handlers = kept

        if not node.handlers and not node.children:
            parent.children = [c for c in parent.children if c is not node]
            return True
        return False

    def remove(self, method: str, pattern: str, priority: int) -> bool:
        """Remove every route sharing the handler found for these arguments.

        Routes registered together for several methods are all removed by
        removing any one of them. Returns False when nothing was found.
        """
        handler_id = self._find_handler(method, pattern, priority)
        if handler_id is None:
            return False
        self._cull(None, self._root, handler_id)
        del self._handlers[handler_id & _HANDLER_MASK]
        return True