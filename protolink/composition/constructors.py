"""
Constructor functions for protolink.

A constructor is sugar over the resolver: `new C(args)` is a fresh Node
delegating to C.prototype, handed to C's initializer as the receiver.
Subclassing links the child prototype to the parent prototype, and the
child initializer calls the parent one explicitly (Parent.call(this, ...)).
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..descriptor import create_descriptor
from ..domain import Node
from ..resolution.chain_resolver import (
    create_object,
    define_own_property,
    is_prototype_of,
)

logger = logging.getLogger(__name__)

# Back-reference every prototype carries to its constructor
CONSTRUCTOR_KEY = "constructor"

Initializer = Callable[..., None]


class Constructor:
    """
    A named initializer paired with a shared prototype Node.

    The prototype holds a non-enumerable `constructor` slot pointing back
    here, so it never shows up when instances are enumerated.
    """

    def __init__(
        self,
        name: str,
        initializer: Optional[Initializer] = None,
        parent: Optional[Constructor] = None,
    ):
        self.name = name
        self.initializer = initializer
        self.parent = parent
        self.prototype = create_object(
            parent.prototype if parent is not None else None,
            label=f"{name}.prototype",
        )
        define_own_property(
            self.prototype,
            CONSTRUCTOR_KEY,
            create_descriptor(value=self, writable=True, enumerable=False, configurable=True),
        )

    def init(self, this: Node, *args: Any, **kwargs: Any) -> Node:
        """Run this constructor's initializer on an existing receiver."""
        if self.initializer is not None:
            self.initializer(this, *args, **kwargs)
        return this

    def __call__(self, *args: Any, **kwargs: Any) -> Node:
        """The `new` operator: create, link, initialize."""
        instance = create_object(self.prototype, label=self.name)
        self.init(instance, *args, **kwargs)
        logger.debug("Constructed %r via %s", instance, self.name)
        return instance

    def __repr__(self) -> str:
        return f"<Constructor {self.name}>"


def define_constructor(
    name: str,
    initializer: Optional[Initializer] = None,
    parent: Optional[Constructor] = None,
) -> Constructor:
    """Factory for a Constructor, optionally inheriting from parent."""
    return Constructor(name, initializer, parent)


def instance_of(node: Node, constructor: Constructor) -> bool:
    """instanceof: constructor.prototype is somewhere in node's chain."""
    return is_prototype_of(constructor.prototype, node)
