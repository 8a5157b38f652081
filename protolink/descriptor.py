"""
Property Descriptors - the slot contract for every Node property.

SLOT INVARIANT:
    Once a slot is non-configurable it can never become configurable again,
    it can never be removed, its enumerability is fixed, and a non-writable
    value is frozen. Violations raise ConfigurationError at define time.

Slot origins:
    Assignment  - created by a plain write; every flag is true
    Descriptor  - created by an explicit definition; omitted flags are false
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Optional


# Defaults per slot origin
ASSIGNMENT_DEFAULTS = {
    "writable": True,
    "enumerable": True,
    "configurable": True,
}

DESCRIPTOR_DEFAULTS = {
    "writable": False,
    "enumerable": False,
    "configurable": False,
}


class ObjectModelError(Exception):
    """Base class for every failure raised by the object model."""
    pass


class ConfigurationError(ObjectModelError):
    """Raised when a non-configurable slot would be altered."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"cannot redefine property '{key}': {reason}")


@dataclass(frozen=True)
class PropertySlot:
    """
    A stored own property of a Node.

    Slots are immutable records. Changing a value or a flag replaces the
    slot in the owning Node's mapping, so a slot handed out by a lookup
    never changes underneath its reader.
    """
    value: Any = None
    writable: bool = True
    enumerable: bool = True
    configurable: bool = True

    def with_value(self, value: Any) -> PropertySlot:
        """Copy of this slot holding a new value, flags unchanged."""
        return replace(self, value=value)

    def describe(self) -> PropertyDescriptor:
        """Full descriptor for this slot (Object.getOwnPropertyDescriptor)."""
        return PropertyDescriptor(
            value=self.value,
            writable=self.writable,
            enumerable=self.enumerable,
            configurable=self.configurable,
        )


_UNSET = object()


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    A partial slot definition passed to define_own_property.

    Any field left as None (or, for value, left out) is "omitted": on
    creation it falls back to DESCRIPTOR_DEFAULTS, on reconfiguration it
    keeps the current slot's value.
    """
    value: Any = _UNSET
    writable: Optional[bool] = None
    enumerable: Optional[bool] = None
    configurable: Optional[bool] = None

    @property
    def has_value(self) -> bool:
        return self.value is not _UNSET

    def to_slot(self) -> PropertySlot:
        """Build a brand-new slot, applying descriptor defaults."""
        return PropertySlot(
            value=self.value if self.has_value else None,
            writable=_flag(self.writable, DESCRIPTOR_DEFAULTS["writable"]),
            enumerable=_flag(self.enumerable, DESCRIPTOR_DEFAULTS["enumerable"]),
            configurable=_flag(self.configurable, DESCRIPTOR_DEFAULTS["configurable"]),
        )

    def as_dict(self) -> dict[str, Any]:
        """Only the fields that were actually given."""
        fields: dict[str, Any] = {}
        if self.has_value:
            fields["value"] = self.value
        for name in ("writable", "enumerable", "configurable"):
            flag = getattr(self, name)
            if flag is not None:
                fields[name] = flag
        return fields


def _flag(given: Optional[bool], default: bool) -> bool:
    return default if given is None else bool(given)


def same_value(a: Any, b: Any) -> bool:
    """
    Identity-or-equality comparison used for frozen values.

    Values of different types never match, so 1 and True are distinct.
    NaN is treated as equal to NaN so that redefining a frozen NaN with
    NaN is not reported as a change.
    """
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, float) and math.isnan(a) and math.isnan(b):
        return True
    return bool(a == b)


def create_assignment_slot(value: Any) -> PropertySlot:
    """
    Factory for a slot created by plain assignment.

    This is the most common slot origin: `obj.key = value`.
    """
    return PropertySlot(value=value, **ASSIGNMENT_DEFAULTS)


def create_descriptor(
    value: Any = _UNSET,
    writable: Optional[bool] = None,
    enumerable: Optional[bool] = None,
    configurable: Optional[bool] = None,
) -> PropertyDescriptor:
    """Factory for a PropertyDescriptor; omitted arguments stay omitted."""
    return PropertyDescriptor(
        value=value,
        writable=writable,
        enumerable=enumerable,
        configurable=configurable,
    )


def apply_descriptor(
    key: str,
    current: Optional[PropertySlot],
    descriptor: PropertyDescriptor,
) -> PropertySlot:
    """
    Validate a descriptor against the current slot and return the new slot.

    Rules for an existing non-configurable slot:
    1. configurable may not become true
    2. enumerable may not change
    3. a non-writable slot may not become writable
    4. a non-writable slot may not receive a different value, and keeps
       its stored object when redefined with an equal one

    Raises:
        ConfigurationError: If any rule is violated (nothing is applied)
    """
    if current is None:
        return descriptor.to_slot()

    if not current.configurable:
        if descriptor.configurable:
            raise ConfigurationError(key, "slot is non-configurable")
        if descriptor.enumerable is not None and descriptor.enumerable != current.enumerable:
            raise ConfigurationError(key, "enumerable flag of a non-configurable slot is fixed")
        if not current.writable:
            if descriptor.writable:
                raise ConfigurationError(key, "non-writable slot cannot become writable")
            if descriptor.has_value and not same_value(descriptor.value, current.value):
                raise ConfigurationError(key, "value of a non-writable slot is frozen")
            descriptor = replace(descriptor, value=current.value)

    return PropertySlot(
        value=descriptor.value if descriptor.has_value else current.value,
        writable=_flag(descriptor.writable, current.writable),
        enumerable=_flag(descriptor.enumerable, current.enumerable),
        configurable=_flag(descriptor.configurable, current.configurable),
    )
