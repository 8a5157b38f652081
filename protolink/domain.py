"""
Core Domain Objects for protolink.

Nodes are plain containers. They never resolve anything on their own:
lookup, assignment, linking and enumeration live in the resolver so that
shadowing and cycle checks stay explicit.

Domain Objects:
    Node              - An ordered mapping of own slots plus one delegate link
    ResolutionResult  - Found(value, owner) or NotFound, never an exception
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

from .descriptor import (
    ConfigurationError,
    ObjectModelError,
    PropertySlot,
    create_assignment_slot,
)


# =============================================================================
# ERRORS
# =============================================================================

class CycleError(ObjectModelError):
    """Raised when linking a delegate would make the chain loop back."""

    def __init__(self, node: Node, delegate: Node):
        self.node = node
        self.delegate = delegate
        super().__init__(
            f"cyclic delegate link: {delegate!r} already delegates to {node!r}"
            if delegate is not node
            else f"cyclic delegate link: {node!r} cannot delegate to itself"
        )


class NonWritableError(ObjectModelError):
    """Raised under the strict write policy when a read-only slot is written."""

    def __init__(self, node: Node, key: str):
        self.node = node
        self.key = key
        super().__init__(f"cannot assign to read only property '{key}' of {node!r}")


class UnresolvedPropertyError(ObjectModelError, LookupError):
    """Raised by invoke() when no Node in the chain defines the key."""

    def __init__(self, node: Node, key: str):
        self.node = node
        self.key = key
        super().__init__(f"{node!r} has no property '{key}' along its delegate chain")


# =============================================================================
# WRITE POLICY
# =============================================================================

class WritePolicy(Enum):
    """
    What happens when a write hits a protected slot.

    SILENT: the write is ignored (sloppy-mode assignment)
    STRICT: the write raises (strict-mode assignment)
    """
    SILENT = "silent"
    STRICT = "strict"


DEFAULT_WRITE_POLICY = WritePolicy.SILENT


# =============================================================================
# NODE
# =============================================================================

@dataclass(eq=False)
class Node:
    """
    An object in the example domain.

    slots keeps insertion order, which is the order own keys are
    enumerated in. The delegate is a shared reference: many Nodes may
    delegate to the same prototype and none of them owns it.

    Use link_delegate() to change the delegate after creation; assigning
    the attribute directly skips the cycle check.
    """
    slots: dict[str, PropertySlot] = field(default_factory=dict)
    delegate: Optional[Node] = None
    label: Optional[str] = None

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, Any],
        delegate: Optional[Node] = None,
        label: Optional[str] = None,
    ) -> Node:
        """Object-literal style construction: every value is a plain assignment."""
        return cls(
            slots={key: create_assignment_slot(value) for key, value in values.items()},
            delegate=delegate,
            label=label,
        )

    def has_own(self, key: str) -> bool:
        return key in self.slots

    def own_slot(self, key: str) -> Optional[PropertySlot]:
        return self.slots.get(key)

    def own_keys(self) -> Iterator[str]:
        return iter(self.slots)

    def own_values(self) -> dict[str, Any]:
        """Snapshot of own values, for display and test assertions."""
        return {key: slot.value for key, slot in self.slots.items()}

    def __repr__(self) -> str:
        name = self.label or "Node"
        return f"<{name} keys={list(self.slots)}>"


# =============================================================================
# RESOLUTION RESULT
# =============================================================================

@dataclass(frozen=True)
class ResolutionResult:
    """
    Result of a property lookup.

    found=True carries the value and the Node that owns the slot.
    found=False is the NotFound outcome; value and owner are None.
    """
    found: bool
    value: Any = None
    owner: Optional[Node] = None

    @classmethod
    def hit(cls, value: Any, owner: Node) -> ResolutionResult:
        return cls(found=True, value=value, owner=owner)

    def value_or(self, default: Any = None) -> Any:
        """The resolved value, or default when nothing was found."""
        return self.value if self.found else default

    def __bool__(self) -> bool:
        return self.found


NOT_FOUND = ResolutionResult(found=False)
