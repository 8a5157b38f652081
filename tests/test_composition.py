"""
Tests for Constructors and Mixins.

These tests verify:
1. Constructed Nodes delegate to a shared prototype
2. Subclass prototypes chain to parent prototypes
3. The constructor back-reference is hidden from enumeration
4. merge_into copies own enumerable values with left-to-right precedence
5. Copied values are shared by reference, not deep-copied
"""

import pytest

from protolink.composition.constructors import (
    CONSTRUCTOR_KEY,
    define_constructor,
    instance_of,
)
from protolink.composition.mixins import functional_mixin, merge_into
from protolink.descriptor import create_descriptor
from protolink.domain import Node, NonWritableError, WritePolicy
from protolink.resolution.chain_resolver import (
    create_object,
    define_own_property,
    enumerate_own_and_inherited,
    get_property,
    get_prototype_of,
    invoke,
    is_prototype_of,
    object_from_mapping,
    set_property,
)


# =============================================================================
# TEST FIXTURES
# =============================================================================

def transaction_init(this: Node, sender: str, recipient: str) -> None:
    set_property(this, "sender", sender)
    set_property(this, "recipient", recipient)


# =============================================================================
# CONSTRUCTOR TESTS
# =============================================================================

class TestConstructors:
    """Test constructor sugar."""

    def test_instance_delegates_to_prototype(self):
        """new C() links the instance to C.prototype."""
        Transaction = define_constructor("Transaction", transaction_init)
        tx = Transaction("a@x.com", "b@x.com")
        assert get_prototype_of(tx) is Transaction.prototype
        assert tx.own_values() == {"sender": "a@x.com", "recipient": "b@x.com"}

    def test_prototype_behaviors_are_shared(self):
        """Two instances resolve the same behavior object."""
        Transaction = define_constructor("Transaction", transaction_init)
        set_property(Transaction.prototype, "display", lambda this: "tx")
        tx1 = Transaction("a", "b")
        tx2 = Transaction("a", "b")
        assert get_property(tx1, "display").value is get_property(tx2, "display").value
        assert get_property(tx1, "display").owner is Transaction.prototype

    def test_constructor_slot_is_hidden(self):
        """The constructor back-reference is non-enumerable but writable."""
        Transaction = define_constructor("Transaction", transaction_init)
        slot = Transaction.prototype.own_slot(CONSTRUCTOR_KEY)
        assert slot.value is Transaction
        assert not slot.enumerable
        assert slot.writable and slot.configurable
        tx = Transaction("a", "b")
        assert CONSTRUCTOR_KEY not in list(enumerate_own_and_inherited(tx))
        assert get_property(tx, CONSTRUCTOR_KEY).value is Transaction

    def test_subclass_chain(self):
        """Child prototype delegates to parent prototype."""
        TransactionC = define_constructor("TransactionC", transaction_init)
        set_property(
            TransactionC.prototype,
            "display_transaction",
            lambda this: (
                f"Transaction from {get_property(this, 'sender').value} "
                f"to {get_property(this, 'recipient').value}"
            ),
        )
        HashTransactionC = define_constructor(
            "HashTransactionC",
            lambda this, s, r: TransactionC.init(this, s, r),
            parent=TransactionC,
        )
        tx = HashTransactionC("luis@tjoj.com", "luke@tjoj.com")

        assert is_prototype_of(TransactionC.prototype, tx)
        assert is_prototype_of(HashTransactionC.prototype, tx)
        assert instance_of(tx, TransactionC)
        assert instance_of(tx, HashTransactionC)
        assert invoke(tx, "display_transaction") == (
            "Transaction from luis@tjoj.com to luke@tjoj.com"
        )
        assert get_property(tx, CONSTRUCTOR_KEY).value is HashTransactionC

    def test_unlinked_constructors_are_unrelated(self):
        """Calling a parent initializer alone does not link prototypes."""
        Transaction = define_constructor("Transaction", transaction_init)
        HashTransaction = define_constructor(
            "HashTransaction", lambda this, s, r: Transaction.init(this, s, r),
        )
        tx = HashTransaction("a", "b")
        assert get_property(tx, "sender").value == "a"
        assert not instance_of(tx, Transaction)

    def test_constructor_without_initializer(self):
        """A bare constructor produces an empty linked Node."""
        Empty = define_constructor("Empty")
        node = Empty()
        assert node.slots == {}
        assert instance_of(node, Empty)


# =============================================================================
# MIXIN TESTS
# =============================================================================

class TestMergeInto:
    """Test copy-based composition."""

    def test_merge_precedence(self):
        """Later sources win over earlier ones."""
        target = merge_into(
            Node(),
            object_from_mapping({"a": 1, "b": 1}),
            object_from_mapping({"b": 2, "c": 2}),
        )
        assert target.own_values() == {"a": 1, "b": 2, "c": 2}

    def test_target_keys_are_overwritten(self):
        """Existing target values are replaced."""
        target = object_from_mapping({"z": "z", "a": "old"})
        merge_into(target, object_from_mapping({"a": "a"}), object_from_mapping({"a": "dd"}))
        assert target.own_values() == {"z": "z", "a": "dd"}

    def test_returns_target(self):
        """merge_into returns the very same target Node."""
        target = Node()
        assert merge_into(target, object_from_mapping({"a": 1})) is target

    def test_non_enumerable_not_copied(self):
        """Hidden source slots are skipped."""
        hidden = Node()
        define_own_property(hidden, "b", create_descriptor(value="b", enumerable=False))
        target = merge_into(Node(), object_from_mapping({"a": "a"}), hidden)
        assert target.own_values() == {"a": "a"}

    def test_inherited_not_copied(self):
        """Only own keys of a source are copied."""
        source = create_object(object_from_mapping({"parent": "parent"}))
        set_property(source, "c_key", "c")
        assert merge_into(Node(), source).own_values() == {"c_key": "c"}

    def test_copied_slots_get_default_flags(self):
        """A locked source slot arrives on the target fully open."""
        source = Node()
        define_own_property(source, "x", create_descriptor(value=1, enumerable=True))
        target = merge_into(Node(), source)
        slot = target.own_slot("x")
        assert slot.writable and slot.enumerable and slot.configurable

    def test_values_are_shared_not_deep_copied(self):
        """Composite values are the same object in source and target."""
        items = [1, 2]
        target = merge_into(Node(), object_from_mapping({"items": items}))
        items.append(3)
        assert get_property(target, "items").value is items
        assert get_property(target, "items").value == [1, 2, 3]

    def test_copy_is_not_live(self):
        """Later source changes are not seen through the target."""
        source = object_from_mapping({"bread": "Wheat"})
        target = merge_into(Node(), source)
        set_property(source, "bread", "Rye")
        assert get_property(target, "bread").value == "Wheat"

    def test_mixin_behaviors_use_target_as_receiver(self):
        """Copied behaviors run against the Node they are invoked on."""
        say_mixin = object_from_mapping({
            "say_hi": lambda this: f"Hello {get_property(this, 'name').value}",
        })
        user = merge_into(object_from_mapping({"name": "John"}), say_mixin)
        assert invoke(user, "say_hi") == "Hello John"

    def test_non_writable_target_slot_kept(self):
        """A read-only target slot is not overwritten by a merge."""
        target = Node()
        define_own_property(target, "a", create_descriptor(value="locked", enumerable=True))
        merge_into(target, object_from_mapping({"a": "new"}))
        assert get_property(target, "a").value == "locked"

    def test_strict_merge_refused_before_any_write(self):
        """A strict merge hitting a read-only key leaves target unchanged."""
        target = Node()
        define_own_property(target, "b", create_descriptor(value="locked", enumerable=True))
        source = object_from_mapping({"a": 1, "b": 2, "c": 3})
        with pytest.raises(NonWritableError) as exc_info:
            merge_into(target, source, policy=WritePolicy.STRICT)
        assert exc_info.value.key == "b"
        assert target.own_values() == {"b": "locked"}


class TestFunctionalMixin:
    """Test functional_mixin."""

    def test_base_left_untouched(self):
        """The base Node is copied, not modified."""
        base = object_from_mapping({"name": "bird"})
        result = functional_mixin(base, {"fly": lambda this: this})
        assert result is not base
        assert not base.has_own("fly")
        assert result.own_values()["name"] == "bird"

    def test_closure_state(self):
        """Behaviors may share private closure state."""
        state = {"flying": False}

        def fly(this):
            state["flying"] = True
            return this

        bird = functional_mixin(None, {
            "fly": fly,
            "is_flying": lambda this: state["flying"],
        })
        assert invoke(bird, "is_flying") is False
        assert invoke(invoke(bird, "fly"), "is_flying") is True
