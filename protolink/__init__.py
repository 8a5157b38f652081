# protolink
# Explicit prototype chains, descriptors and mixins

"""
Core invariant: a Node's own slot always wins over anything its delegates
hold, and the delegate graph never contains a cycle.

This package models JavaScript-style delegation (prototype chains,
Object.create, constructor functions and copy-based mixins) as plain data
plus a resolver, so every lookup rule is explicit.
"""
