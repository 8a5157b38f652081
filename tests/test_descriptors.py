"""
Tests for the Property Descriptor model.

These tests verify:
1. Slot defaults differ by origin (assignment vs explicit descriptor)
2. Reconfiguration keeps omitted fields
3. Non-configurable slots refuse protected changes
4. Refused definitions leave the Node untouched
"""

import math

import pytest

from protolink.descriptor import (
    ASSIGNMENT_DEFAULTS,
    DESCRIPTOR_DEFAULTS,
    ConfigurationError,
    PropertyDescriptor,
    PropertySlot,
    apply_descriptor,
    create_assignment_slot,
    create_descriptor,
    same_value,
)
from protolink.domain import Node, ObjectModelError
from protolink.resolution.chain_resolver import (
    define_own_property,
    define_properties,
    get_own_property_descriptor,
    get_property,
)


# =============================================================================
# DEFAULTS
# =============================================================================

class TestSlotDefaults:
    """Test default flags per slot origin."""

    def test_assignment_slot_is_fully_open(self):
        """Plain assignment sets every flag to true."""
        slot = create_assignment_slot(42)
        assert slot == PropertySlot(value=42, **ASSIGNMENT_DEFAULTS)
        assert slot.writable and slot.enumerable and slot.configurable

    def test_descriptor_omitted_flags_are_false(self):
        """A descriptor creating a slot defaults omitted flags to false."""
        slot = create_descriptor(value="b").to_slot()
        assert slot.value == "b"
        assert not slot.writable
        assert not slot.enumerable
        assert not slot.configurable
        assert DESCRIPTOR_DEFAULTS == {
            "writable": False, "enumerable": False, "configurable": False,
        }

    def test_descriptor_without_value_defaults_to_none(self):
        """Omitted value becomes None (undefined)."""
        assert create_descriptor(enumerable=True).to_slot().value is None

    def test_as_dict_reports_only_given_fields(self):
        """as_dict leaves omitted fields out."""
        descriptor = create_descriptor(value=1, writable=False)
        assert descriptor.as_dict() == {"value": 1, "writable": False}
        assert PropertyDescriptor().as_dict() == {}

    def test_explicit_none_value_is_given(self):
        """value=None counts as a given value, unlike an omitted one."""
        assert create_descriptor(value=None).has_value
        assert not create_descriptor().has_value


# =============================================================================
# RECONFIGURATION
# =============================================================================

class TestReconfiguration:
    """Test redefining slots."""

    def test_configurable_slot_keeps_omitted_fields(self):
        """Omitted fields keep the current slot's values."""
        current = create_assignment_slot("a")
        updated = apply_descriptor("a", current, create_descriptor(enumerable=False))
        assert updated.value == "a"
        assert updated.writable
        assert not updated.enumerable
        assert updated.configurable

    def test_configurable_slot_can_change_everything(self):
        """A configurable slot may be made writable again."""
        current = PropertySlot(value=1, writable=False, enumerable=False, configurable=True)
        updated = apply_descriptor("x", current, create_descriptor(value=2, writable=True))
        assert updated.value == 2
        assert updated.writable

    def test_define_own_property_on_node(self):
        """define_own_property stores the resulting slot."""
        node = Node()
        define_own_property(node, "funds", create_descriptor(
            value=0.0, enumerable=True, writable=True, configurable=False,
        ))
        descriptor = get_own_property_descriptor(node, "funds")
        assert descriptor == PropertyDescriptor(
            value=0.0, writable=True, enumerable=True, configurable=False,
        )

    def test_missing_descriptor_is_none(self):
        """No own slot means no descriptor."""
        assert get_own_property_descriptor(Node(), "missing") is None


# =============================================================================
# NON-CONFIGURABLE SLOTS
# =============================================================================

class TestNonConfigurable:
    """Test that locked slots refuse protected changes."""

    def _locked(self, writable: bool) -> Node:
        node = Node()
        define_own_property(node, "x", create_descriptor(
            value=1, writable=writable, enumerable=True, configurable=False,
        ))
        return node

    def test_cannot_become_configurable(self):
        """configurable=False is permanent."""
        node = self._locked(writable=True)
        with pytest.raises(ConfigurationError) as exc_info:
            define_own_property(node, "x", create_descriptor(configurable=True))
        assert exc_info.value.key == "x"

    def test_cannot_toggle_enumerable(self):
        """Enumerability is fixed once non-configurable."""
        node = self._locked(writable=True)
        with pytest.raises(ConfigurationError, match="enumerable"):
            define_own_property(node, "x", create_descriptor(enumerable=False))

    def test_cannot_become_writable_again(self):
        """writable may not go from false back to true."""
        node = self._locked(writable=False)
        with pytest.raises(ConfigurationError, match="cannot become writable"):
            define_own_property(node, "x", create_descriptor(writable=True))

    def test_frozen_value_cannot_change(self):
        """A non-writable, non-configurable value is frozen."""
        node = self._locked(writable=False)
        with pytest.raises(ConfigurationError, match="frozen"):
            define_own_property(node, "x", create_descriptor(value=2))

    def test_same_value_redefinition_is_allowed(self):
        """Redefining with identical attributes is not a change."""
        node = self._locked(writable=False)
        define_own_property(node, "x", create_descriptor(
            value=1, writable=False, enumerable=True, configurable=False,
        ))
        assert get_property(node, "x").value == 1

    def test_frozen_value_rejects_equal_value_of_other_type(self):
        """A frozen 1 cannot be swapped for True."""
        node = self._locked(writable=False)
        with pytest.raises(ConfigurationError, match="frozen"):
            define_own_property(node, "x", create_descriptor(value=True))
        assert type(node.own_slot("x").value) is int

    def test_frozen_value_keeps_stored_object(self):
        """Redefining a frozen list with an equal list keeps the original."""
        original = [1, 2]
        node = Node()
        define_own_property(node, "items", create_descriptor(value=original))
        define_own_property(node, "items", create_descriptor(value=[1, 2]))
        assert node.own_slot("items").value is original

    def test_writable_slot_can_be_locked_down(self):
        """A writable non-configurable slot may still become non-writable."""
        node = self._locked(writable=True)
        define_own_property(node, "x", create_descriptor(value=5, writable=False))
        slot = node.own_slot("x")
        assert slot.value == 5
        assert not slot.writable

    def test_refused_definition_changes_nothing(self):
        """A ConfigurationError leaves the slot exactly as it was."""
        node = self._locked(writable=False)
        before = node.own_slot("x")
        with pytest.raises(ConfigurationError):
            define_own_property(node, "x", create_descriptor(value=99, writable=True))
        assert node.own_slot("x") is before

    def test_define_properties_is_all_or_nothing(self):
        """One bad descriptor in a batch applies none of them."""
        node = self._locked(writable=False)
        with pytest.raises(ConfigurationError):
            define_properties(node, {
                "fresh": create_descriptor(value="new", enumerable=True),
                "x": create_descriptor(value=2),
            })
        assert not node.has_own("fresh")

    def test_configuration_error_is_object_model_error(self):
        """ConfigurationError belongs to the common error hierarchy."""
        assert issubclass(ConfigurationError, ObjectModelError)


class TestSameValue:
    """Test the frozen-value comparison."""

    def test_equal_values(self):
        assert same_value(1, 1)
        assert same_value("a", "a")

    def test_different_values(self):
        assert not same_value(1, 2)

    def test_nan_equals_nan(self):
        """NaN is the same value as NaN."""
        assert same_value(math.nan, float("nan"))

    def test_bool_is_not_the_same_value_as_int(self):
        """True == 1 in Python, but they are different frozen values."""
        assert not same_value(1, True)
        assert not same_value(0, False)
