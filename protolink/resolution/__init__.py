# Resolution package for protolink
"""
Prototype chain resolution.

Reads, writes, delegate links and enumeration over Nodes.
Shadowing and cycle checks are enforced here, not by the Nodes.
"""
