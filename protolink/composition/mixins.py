"""
Copy-based mixins for protolink.

A mixin is copied, not linked: after merge_into the target holds its own
slots and later changes to the source are not seen through the target.
This is the opposite of delegation, where a change to the prototype is
visible to every Node linked to it.

Only the values are shared. A list or dict copied into two targets is the
same object in both.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..domain import DEFAULT_WRITE_POLICY, Node, NonWritableError, WritePolicy
from ..resolution.chain_resolver import object_from_mapping, set_property


def merge_into(
    target: Node,
    *sources: Node,
    policy: WritePolicy = DEFAULT_WRITE_POLICY,
) -> Node:
    """
    Copy own enumerable values of each source into target (Object.assign).

    Sources are applied left to right, so later sources overwrite earlier
    ones and any matching key already on target. Inherited and
    non-enumerable slots of a source are not copied.

    Writes go through set_property: new slots get assignment defaults and
    a non-writable slot on target is left alone. Under STRICT every key is
    checked before the first write, so a refused merge changes nothing.

    Returns:
        target

    Raises:
        NonWritableError: Under STRICT, if any copied key is read-only on target
    """
    copies = [
        (key, slot.value)
        for source in sources
        if source is not None
        for key, slot in source.slots.items()
        if slot.enumerable
    ]

    if policy is WritePolicy.STRICT:
        for key, _ in copies:
            current = target.own_slot(key)
            if current is not None and not current.writable:
                raise NonWritableError(target, key)

    for key, value in copies:
        set_property(target, key, value, policy=policy)
    return target


def functional_mixin(
    base: Optional[Node],
    behaviors: Mapping[str, Any],
    label: Optional[str] = None,
) -> Node:
    """
    Build a fresh Node from base plus a set of behaviors.

    Equivalent to Object.assign({}, base, behaviors): neither base nor the
    behaviors mapping is modified.
    """
    result = Node(label=label)
    if base is not None:
        merge_into(result, base)
    return merge_into(result, object_from_mapping(behaviors))
