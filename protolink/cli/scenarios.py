"""
Demonstration Scenarios for protolink.

Each scenario rebuilds one of the classic object-creation examples on top
of the resolver and narrates what a reader would see in a console:

    constructors  - Transaction / HashTransaction constructor functions
    delegation    - Object.create, descriptor maps, setPrototypeOf
    oloo          - MyStore / Blockchain and Animal / Dog linked objects
    mixins        - sayMixin, HasBread, HasHash and a functional mixin
    inheritance   - Animal / Cat with a hidden constructor back-reference

Scenarios are deterministic and hold no state between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..composition.constructors import CONSTRUCTOR_KEY, define_constructor, instance_of
from ..composition.mixins import functional_mixin, merge_into
from ..descriptor import ConfigurationError, create_descriptor
from ..domain import DEFAULT_WRITE_POLICY, Node, NonWritableError, WritePolicy
from ..hashing import calculate_hash, format_number, has_hash
from ..resolution.chain_resolver import (
    create_object,
    define_own_property,
    enumerate_own_and_inherited,
    get_property,
    get_prototype_of,
    has_own_property,
    invoke,
    is_prototype_of,
    link_delegate,
    object_from_mapping,
    set_property,
    set_prototype_of,
)


# =============================================================================
# SCENARIO RESULT
# =============================================================================

@dataclass
class ScenarioResult:
    """
    Outcome of running one scenario.

    subject is the Node the scenario builds up to; `protolink inspect`
    prints its slots and delegate chain.
    """
    name: str
    subject: Node
    lines: list[str] = field(default_factory=list)

    def say(self, label: str, value: Any) -> None:
        self.lines.append(f"{label}: {describe_value(value)}")


def describe_value(value: Any) -> str:
    """Console-style rendering of a resolved value."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, Node):
        return repr(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(describe_value(v) for v in value) + "]"
    if isinstance(value, dict):
        inner = ", ".join(f"{k}: {describe_value(v)}" for k, v in value.items())
        return "{ " + inner + " }" if inner else "{}"
    if callable(value):
        name = getattr(value, "__name__", None) or getattr(value, "name", "anonymous")
        return f"[Function: {name}]"
    return str(value)


def _read(node: Node, key: str) -> Any:
    return get_property(node, key).value


# =============================================================================
# CONSTRUCTOR FUNCTIONS
# =============================================================================

def run_constructors(policy: WritePolicy = DEFAULT_WRITE_POLICY) -> ScenarioResult:
    """Per-instance behaviors versus behaviors shared through a prototype."""

    def transaction_init(this: Node, sender: str, recipient: str) -> None:
        set_property(this, "sender", sender, policy=policy)
        set_property(this, "recipient", recipient, policy=policy)

    Transaction = define_constructor("Transaction", transaction_init)

    def hash_transaction_init(this: Node, sender: str, recipient: str) -> None:
        Transaction.init(this, sender, recipient)

        # A fresh closure per instance: nothing is shared
        def own_calculate_hash(receiver: Node) -> float:
            return calculate_hash(receiver)

        set_property(this, "calculate_hash", own_calculate_hash, policy=policy)

    HashTransaction = define_constructor("HashTransaction", hash_transaction_init)

    tx = HashTransaction("luis@tjoj.com", "luke@tjoj.com")
    result = ScenarioResult(name="constructors", subject=tx)
    result.say("tx.calculate_hash()", invoke(tx, "calculate_hash"))
    result.say("tx.sender", _read(tx, "sender"))

    tx1 = HashTransaction("luis@tjoj.com", "luke@tjoj.com")
    tx2 = HashTransaction("luis@tjoj.com", "luke@tjoj.com")
    result.say(
        "per-instance calculate_hash shared",
        _read(tx1, "calculate_hash") is _read(tx2, "calculate_hash"),
    )

    set_property(HashTransaction.prototype, "calculate_hash2", calculate_hash, policy=policy)
    result.say(
        "prototype calculate_hash2 shared",
        _read(tx1, "calculate_hash2") is _read(tx2, "calculate_hash2"),
    )
    result.say(
        "Transaction.prototype is prototype of tx",
        is_prototype_of(Transaction.prototype, tx),
    )

    # Linked version: HashTransactionC.prototype delegates to TransactionC.prototype
    TransactionC = define_constructor("TransactionC", transaction_init)

    def display_transaction(this: Node) -> str:
        return f"Transaction from {_read(this, 'sender')} to {_read(this, 'recipient')}"

    set_property(TransactionC.prototype, "display_transaction", display_transaction, policy=policy)

    HashTransactionC = define_constructor(
        "HashTransactionC",
        lambda this, sender, recipient: TransactionC.init(this, sender, recipient),
        parent=TransactionC,
    )
    set_property(HashTransactionC.prototype, "calculate_hash", calculate_hash, policy=policy)

    tx_c = HashTransactionC("luis@tjoj.com", "luke@tjoj.com")
    tx2_c = HashTransactionC("luis@tjoj.com", "luke@tjoj.com")
    result.say(
        "TransactionC.prototype is prototype of txC",
        is_prototype_of(TransactionC.prototype, tx_c),
    )
    result.say(
        "HashTransactionC.prototype is prototype of txC",
        is_prototype_of(HashTransactionC.prototype, tx_c),
    )
    result.say("txC.display_transaction()", invoke(tx_c, "display_transaction"))
    result.say("txC.calculate_hash()", invoke(tx_c, "calculate_hash"))
    result.say(
        "display_transaction shared",
        _read(tx_c, "display_transaction") is _read(tx2_c, "display_transaction"),
    )
    result.say("txC.constructor", _read(tx_c, CONSTRUCTOR_KEY))

    result.subject = tx_c
    return result


# =============================================================================
# OBJECT.CREATE AND DESCRIPTORS
# =============================================================================

def run_delegation(policy: WritePolicy = DEFAULT_WRITE_POLICY) -> ScenarioResult:
    """Object.create, descriptor maps and late prototype links."""
    proto = object_from_mapping({"sender": "sender@gmail.com"}, label="proto")
    child = create_object(proto, label="child")
    result = ScenarioResult(name="delegation", subject=child)

    set_property(child, "recipient", "recipient@gmail.com", policy=policy)
    result.say("child own values", child.own_values())
    result.say("child.sender", _read(child, "sender"))
    result.say("getPrototypeOf(child) is proto", get_prototype_of(child) is proto)

    transaction = object_from_mapping(
        {"sender": "sender@gg.com", "recipient": "recipient@gg.com"},
        label="transaction",
    )
    money_transaction = create_object(
        transaction,
        {
            "funds": create_descriptor(
                value=0.0, enumerable=True, writable=True, configurable=False,
            ),
        },
        label="moneyTransaction",
    )

    def add_funds(this: Node, funds: float = 0) -> Node:
        set_property(this, "funds", _read(this, "funds") + float(funds), policy=policy)
        return this

    set_property(transaction, "add_funds", add_funds, policy=policy)
    define_own_property(
        transaction, "add_funds", create_descriptor(enumerable=False),
    )
    invoke(money_transaction, "add_funds", 10.0)
    result.say("moneyTransaction.funds", _read(money_transaction, "funds"))
    result.say("for-in keys", list(enumerate_own_and_inherited(money_transaction)))
    result.say("transaction is prototype of moneyTransaction",
               is_prototype_of(transaction, money_transaction))

    try:
        define_own_property(money_transaction, "funds", create_descriptor(enumerable=False))
    except ConfigurationError as e:
        result.lines.append(f"redefine funds refused: {e.reason}")

    define_own_property(
        money_transaction,
        "id",
        create_descriptor(value="tx-1", enumerable=True, writable=False, configurable=True),
    )
    try:
        applied = set_property(money_transaction, "id", "tx-2", policy=policy)
        result.say("write to read-only id applied", applied)
    except NonWritableError as e:
        result.lines.append(f"write to read-only id refused: {e}")
    result.say("moneyTransaction.id", _read(money_transaction, "id"))

    obj = Node(label="obj")
    parent = object_from_mapping({"foo": "bar"}, label="parent")
    result.say("obj.foo before link", _read(obj, "foo"))
    set_prototype_of(obj, parent)
    result.say("obj.foo after link", _read(obj, "foo"))
    # End of chain prints as null, not undefined
    result.lines.append(f"getPrototypeOf(parent): {get_prototype_of(parent) or 'null'}")

    result.subject = money_transaction
    return result


# =============================================================================
# OBJECTS LINKED TO OTHER OBJECTS
# =============================================================================

def run_oloo(policy: WritePolicy = DEFAULT_WRITE_POLICY) -> ScenarioResult:
    """Behavior delegation with no constructors at all."""

    def store_init(this: Node, element: Any) -> Node:
        set_property(this, "length", 0, policy=policy)
        invoke(this, "push", element)
        return this

    def store_push(this: Node, item: Any) -> int:
        length = _read(this, "length")
        set_property(this, str(length), item, policy=policy)
        set_property(this, "length", length + 1, policy=policy)
        return length + 1

    MyStore = object_from_mapping({"init": store_init, "push": store_push}, label="MyStore")
    Blockchain = create_object(MyStore, label="Blockchain")
    chain = create_object(Blockchain, label="chain")

    def block_init(this: Node, data: str, previous_hash: str) -> None:
        set_property(this, "data", data, policy=policy)
        set_property(this, "previous_hash", previous_hash, policy=policy)
        set_property(this, "hash", invoke(this, "calculate_hash"), policy=policy)

    Block = define_constructor("Block", block_init)
    set_property(
        Block.prototype,
        "calculate_hash",
        lambda this: _read(this, "data") + _read(this, "previous_hash"),
        policy=policy,
    )

    invoke(chain, "init", Block("Genesis Block", "0"))
    invoke(chain, "push", Block("Block Data", "Previous Block Hash"))

    result = ScenarioResult(name="oloo", subject=chain)
    result.say("chain.length", _read(chain, "length"))
    result.say("chain[1].hash", _read(_read(chain, "1"), "hash"))
    result.say("MyStore is prototype of Blockchain", is_prototype_of(MyStore, Blockchain))
    result.say("chain's prototype has init", get_property(get_prototype_of(chain), "init").found)
    result.say("Blockchain.prototype", _read(Blockchain, "prototype"))

    def animal_init(this: Node, name: str) -> Node:
        set_property(this, "name", name, policy=policy)
        return this

    Animal = object_from_mapping(
        {
            "init": animal_init,
            "eat": lambda this: f"{_read(this, 'name')} is eating.",
        },
        label="Animal",
    )
    Dog = create_object(Animal, label="Dog")

    def dog_init(this: Node, name: str, breed: str) -> Node:
        _read(Animal, "init")(this, name)
        set_property(this, "breed", breed, policy=policy)
        return this

    set_property(Dog, "init", dog_init, policy=policy)
    set_property(Dog, "bark", lambda this: f"{_read(this, 'name')} is barking.", policy=policy)

    my_dog = invoke(create_object(Dog, label="myDog"), "init", "Rex", "German Shepherd")
    result.say("myDog.eat()", invoke(my_dog, "eat"))
    result.say("myDog.bark()", invoke(my_dog, "bark"))

    return result


# =============================================================================
# MIXINS
# =============================================================================

def run_mixins(policy: WritePolicy = DEFAULT_WRITE_POLICY) -> ScenarioResult:
    """Copying behaviors in instead of linking to them."""
    say_mixin = object_from_mapping(
        {
            "say_hi": lambda this: f"Hello {_read(this, 'name')}",
            "say_bye": lambda this: f"Bye {_read(this, 'name')}",
        },
        label="sayMixin",
    )

    user = object_from_mapping({"name": "John"}, label="user")
    merge_into(user, say_mixin, policy=policy)
    result = ScenarioResult(name="mixins", subject=user)
    result.say("user.say_hi()", invoke(user, "say_hi"))

    User = define_constructor(
        "User", lambda this, name: set_property(this, "name", name, policy=policy),
    )
    merge_into(User.prototype, say_mixin, policy=policy)
    result.say("new User('Jane').say_bye()", invoke(User("Jane"), "say_bye"))

    has_bread = object_from_mapping({"bread": "Wheat"}, label="HasBread")

    def sandwich(size: Any = "6", unit: str = "in") -> Node:
        return merge_into(
            object_from_mapping({"size": size, "unit": unit}, label="Sandwich"),
            has_bread,
            policy=policy,
        )

    foot_long = sandwich(1, "ft")
    result.say("footLong.bread", _read(foot_long, "bread"))

    def transaction_init(this: Node, sender: str, recipient: str, funds: float = 0.0) -> None:
        set_property(this, "sender", sender, policy=policy)
        set_property(this, "recipient", recipient, policy=policy)
        set_property(this, "funds", float(funds), policy=policy)

    Transaction = define_constructor("Transaction", transaction_init)
    merge_into(
        Transaction.prototype,
        object_from_mapping(has_hash(["sender", "recipient", "funds"])),
        policy=policy,
    )
    tx = Transaction("luis@tjoj.com", "luke@tjoj.com", 10)
    result.say("tx.calculate_hash()", invoke(tx, "calculate_hash"))

    def flying(base: Node) -> Node:
        state = {"is_flying": False}

        def fly(this: Node) -> Node:
            state["is_flying"] = True
            return this

        def land(this: Node) -> Node:
            state["is_flying"] = False
            return this

        return functional_mixin(
            base,
            {"fly": fly, "is_flying": lambda this: state["is_flying"], "land": land},
            label="bird",
        )

    bird = flying(Node())
    result.say("bird.is_flying()", invoke(bird, "is_flying"))
    result.say("bird.fly().is_flying()", invoke(invoke(bird, "fly"), "is_flying"))

    merged = merge_into(
        Node(),
        object_from_mapping({"sa": "sa"}),
        object_from_mapping({"sa": "sb", "sb": "sb", "sc": "sc"}),
        object_from_mapping({"sc": "sc"}),
        policy=policy,
    )
    result.say("assign({}, sa, sb, sc)", merged.own_values())

    hidden = Node()
    define_own_property(hidden, "b", create_descriptor(value="b", enumerable=False))
    result.say(
        "assign({}, a, hidden b)",
        merge_into(Node(), object_from_mapping({"a": "a"}), hidden, policy=policy).own_values(),
    )

    inheriting = create_object(object_from_mapping({"parent": "parent"}))
    set_property(inheriting, "c_key", "c", policy=policy)
    result.say("assign({}, c)", merge_into(Node(), inheriting, policy=policy).own_values())

    return result


# =============================================================================
# CONSTRUCTOR INHERITANCE
# =============================================================================

def run_inheritance(policy: WritePolicy = DEFAULT_WRITE_POLICY) -> ScenarioResult:
    """Cat.prototype = new Animal(), with a hidden constructor slot."""
    Animal = define_constructor(
        "Animal", lambda this: set_property(this, "specie", "Animal", policy=policy),
    )
    set_property(
        Animal.prototype, "walk", lambda this: f"{_read(this, 'name')} walks", policy=policy,
    )

    def cat_init(this: Node, name: str) -> None:
        set_property(this, "lives", 9, policy=policy)
        set_property(this, "name", name, policy=policy)
        set_property(
            this,
            "say_name",
            lambda receiver: f"Meow! My name is {_read(receiver, 'name')}",
            policy=policy,
        )

    Cat = define_constructor("Cat", cat_init)
    # An Animal instance in the middle of the chain exposes its own specie
    link_delegate(Cat.prototype, Animal())
    set_property(
        Cat.prototype,
        "meow",
        lambda this: f"My name is {_read(this, 'name')} I do Meow",
        policy=policy,
    )

    bill = Cat("Bailey")
    set_property(bill, "nick_name", lambda this: "kill bill panday", policy=policy)

    result = ScenarioResult(name="inheritance", subject=bill)
    result.say("for-in Cat.prototype", list(enumerate_own_and_inherited(Cat.prototype)))
    result.say("bill.constructor is Cat", _read(bill, CONSTRUCTOR_KEY) is Cat)
    result.say("bill instanceof Animal", instance_of(bill, Animal))
    result.say("bill instanceof Cat", instance_of(bill, Cat))
    result.say(
        "getPrototypeOf(bill) is prototype of bill",
        is_prototype_of(get_prototype_of(bill), bill),
    )
    result.say("bill has own nick_name", has_own_property(bill, "nick_name"))
    result.say("bill.walk()", invoke(bill, "walk"))
    result.say("bill.specie", _read(bill, "specie"))
    result.say("bill.say_name()", invoke(bill, "say_name"))
    result.say("bill.meow()", invoke(bill, "meow"))
    result.say("bill.nick_name()", invoke(bill, "nick_name"))
    result.say("bill.lives", _read(bill, "lives"))
    return result


# =============================================================================
# REGISTRY
# =============================================================================

ScenarioRunner = Callable[[WritePolicy], ScenarioResult]

SCENARIOS: dict[str, tuple[str, ScenarioRunner]] = {
    "constructors": ("Transaction / HashTransaction constructor functions", run_constructors),
    "delegation": ("Object.create, descriptor maps and setPrototypeOf", run_delegation),
    "oloo": ("MyStore / Blockchain and Animal / Dog linked objects", run_oloo),
    "mixins": ("sayMixin, HasBread, HasHash and functional mixins", run_mixins),
    "inheritance": ("Animal / Cat with a hidden constructor slot", run_inheritance),
}


def run_scenario(
    name: str,
    policy: WritePolicy = DEFAULT_WRITE_POLICY,
) -> Optional[ScenarioResult]:
    """Run a scenario by name; None if no such scenario exists."""
    entry = SCENARIOS.get(name)
    if entry is None:
        return None
    _, runner = entry
    return runner(policy)
