"""
Prototype Chain Resolver for protolink.

Every read, write, link and enumeration of a Node goes through here.

Design principles:
- Lookup order is strictly chain order: nearer Nodes shadow farther ones
- Writes only ever touch the receiving Node, never a delegate
- The delegate graph stays acyclic; a cyclic link is refused, not repaired
- Absence is a normal outcome (NOT_FOUND), not an exception

Resolution is O(depth of chain) per lookup. Nothing is cached.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping, Optional

from ..descriptor import (
    PropertyDescriptor,
    apply_descriptor,
    create_assignment_slot,
)
from ..domain import (
    ConfigurationError,
    CycleError,
    DEFAULT_WRITE_POLICY,
    NOT_FOUND,
    Node,
    NonWritableError,
    ResolutionResult,
    UnresolvedPropertyError,
    WritePolicy,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CHAIN WALKING
# =============================================================================

def walk_chain(node: Node) -> Iterator[Node]:
    """Yield node itself, then each delegate in chain order."""
    current: Optional[Node] = node
    while current is not None:
        yield current
        current = current.delegate


def prototype_chain(node: Node) -> list[Node]:
    """The delegates of node in chain order, excluding node itself."""
    return list(walk_chain(node))[1:]


# =============================================================================
# LOOKUP
# =============================================================================

def get_property(node: Node, key: str) -> ResolutionResult:
    """
    Resolve key on node.

    The first Node in the chain (starting at node) holding an own slot for
    key wins, whatever that slot's flags are.

    Returns:
        ResolutionResult.hit(value, owner) or NOT_FOUND
    """
    for candidate in walk_chain(node):
        slot = candidate.own_slot(key)
        if slot is not None:
            return ResolutionResult.hit(slot.value, candidate)
    return NOT_FOUND


def has_own_property(node: Node, key: str) -> bool:
    """Check if key is an own slot of node (delegates are not consulted)."""
    return node.has_own(key)


def get_own_property_descriptor(node: Node, key: str) -> Optional[PropertyDescriptor]:
    """Full descriptor of an own slot, or None if node has no such slot."""
    slot = node.own_slot(key)
    if slot is None:
        return None
    return slot.describe()


def own_keys(node: Node, include_non_enumerable: bool = False) -> list[str]:
    """Own keys in insertion order; non-enumerable ones only when asked."""
    return [
        key for key, slot in node.slots.items()
        if include_non_enumerable or slot.enumerable
    ]


# =============================================================================
# MUTATION
# =============================================================================

def set_property(
    node: Node,
    key: str,
    value: Any,
    policy: WritePolicy = DEFAULT_WRITE_POLICY,
) -> bool:
    """
    Assign value to an own slot of node.

    - No own slot: a new slot with assignment defaults (all flags true)
    - Own writable slot: value replaced, flags kept
    - Own non-writable slot: ignored under SILENT, raises under STRICT

    Delegates are never written to, even when they own the key.

    Returns:
        True if the write was applied, False if it was ignored

    Raises:
        NonWritableError: Only under WritePolicy.STRICT
    """
    current = node.own_slot(key)

    if current is None:
        node.slots[key] = create_assignment_slot(value)
        return True

    if not current.writable:
        if policy is WritePolicy.STRICT:
            raise NonWritableError(node, key)
        logger.debug("Ignored write to non-writable property %r of %r", key, node)
        return False

    node.slots[key] = current.with_value(value)
    return True


def define_own_property(
    node: Node,
    key: str,
    descriptor: PropertyDescriptor,
) -> Node:
    """
    Create or reconfigure an own slot from an explicit descriptor.

    Omitted flags default to False on creation and keep their current
    values on reconfiguration.

    Raises:
        ConfigurationError: If a non-configurable slot would be altered
    """
    current = node.own_slot(key)
    node.slots[key] = apply_descriptor(key, current, descriptor)
    logger.debug(
        "%s property %r on %r with %s",
        "Redefined" if current is not None else "Defined",
        key,
        node,
        descriptor.as_dict(),
    )
    return node


def define_properties(
    node: Node,
    descriptors: Mapping[str, PropertyDescriptor],
) -> Node:
    """
    Apply several descriptors at once (Object.defineProperties).

    All descriptors are validated before any of them is applied, so a
    ConfigurationError leaves node untouched.
    """
    staged = {
        key: apply_descriptor(key, node.own_slot(key), descriptor)
        for key, descriptor in descriptors.items()
    }
    node.slots.update(staged)
    return node


def delete_property(
    node: Node,
    key: str,
    policy: WritePolicy = DEFAULT_WRITE_POLICY,
) -> bool:
    """
    Remove an own slot.

    Returns:
        True if the slot is gone (or never existed), False if a
        non-configurable slot was kept under SILENT

    Raises:
        ConfigurationError: Non-configurable slot under STRICT
    """
    current = node.own_slot(key)
    if current is None:
        return True

    if not current.configurable:
        if policy is WritePolicy.STRICT:
            raise ConfigurationError(key, "non-configurable slot cannot be deleted")
        logger.debug("Refused delete of non-configurable property %r of %r", key, node)
        return False

    del node.slots[key]
    return True


# =============================================================================
# LINKING
# =============================================================================

def link_delegate(node: Node, delegate: Optional[Node]) -> None:
    """
    Point node at a new delegate (or at none).

    The link is refused when node is already reachable from delegate,
    which covers delegate being node itself. Re-linking node to one of
    its current ancestors is allowed, as Object.setPrototypeOf allows it:
    the ancestor cannot reach node, so no loop can form.

    Raises:
        CycleError: If the link would close a loop
    """
    if delegate is not None:
        for ancestor in walk_chain(delegate):
            if ancestor is node:
                raise CycleError(node, delegate)

    node.delegate = delegate
    logger.debug("Linked %r -> %r", node, delegate)


def set_prototype_of(node: Node, delegate: Optional[Node]) -> Node:
    """Object.setPrototypeOf: link_delegate that returns node."""
    link_delegate(node, delegate)
    return node


def get_prototype_of(node: Node) -> Optional[Node]:
    """Object.getPrototypeOf: the delegate, or None at the end of a chain."""
    return node.delegate


def is_prototype_of(candidate: Node, node: Node) -> bool:
    """
    Check if candidate appears anywhere in node's delegate chain.

    node itself does not count: is_prototype_of(a, a) is False.
    """
    return any(ancestor is candidate for ancestor in prototype_chain(node))


# =============================================================================
# ENUMERATION
# =============================================================================

class ChainKeys:
    """
    The keys a for-in walk over a Node would visit.

    Iterating is lazy and can be repeated; each pass re-reads the chain.
    A key is reported at its first occurrence along the chain. A nearer
    non-enumerable slot hides a farther enumerable one.
    """

    def __init__(self, node: Node):
        self.node = node

    def __iter__(self) -> Iterator[str]:
        for key, _ in self._visible():
            yield key

    def items(self) -> Iterator[tuple[str, Any]]:
        """(key, value) pairs, value taken from the shadowing slot."""
        for key, slot in self._visible():
            yield key, slot.value

    def _visible(self):
        seen: set[str] = set()
        for owner in walk_chain(self.node):
            for key, slot in list(owner.slots.items()):
                if key in seen:
                    continue
                seen.add(key)
                if slot.enumerable:
                    yield key, slot

    def __repr__(self) -> str:
        return f"ChainKeys({list(self)!r})"


def enumerate_own_and_inherited(node: Node) -> ChainKeys:
    """Visible keys of node and its delegates, each key once."""
    return ChainKeys(node)


# =============================================================================
# CREATION AND INVOCATION
# =============================================================================

def create_object(
    proto: Optional[Node] = None,
    descriptors: Optional[Mapping[str, PropertyDescriptor]] = None,
    label: Optional[str] = None,
) -> Node:
    """
    Object.create: a new Node delegating to proto.

    A fresh Node cannot be part of a cycle, so no cycle check is needed.
    """
    node = Node(delegate=proto, label=label)
    if descriptors:
        define_properties(node, descriptors)
    return node


def object_from_mapping(
    values: Mapping[str, Any],
    proto: Optional[Node] = None,
    label: Optional[str] = None,
) -> Node:
    """Object literal: every value becomes a plain-assignment slot."""
    return Node.from_mapping(values, delegate=proto, label=label)


def invoke(node: Node, key: str, *args: Any, **kwargs: Any) -> Any:
    """
    Resolve key through the chain and call it with node as the receiver.

    Behaviors stored in slots are callables taking the receiver first:
    `def greet(this, ...)`. The receiver is always the Node the call was
    made on, not the Node that owns the behavior.

    Raises:
        UnresolvedPropertyError: If no Node in the chain defines key
        TypeError: If the resolved value is not callable
    """
    result = get_property(node, key)
    if not result.found:
        raise UnresolvedPropertyError(node, key)

    behavior: Callable[..., Any] = result.value
    if not callable(behavior):
        raise TypeError(f"property '{key}' of {node!r} is not callable")
    return behavior(node, *args, **kwargs)
