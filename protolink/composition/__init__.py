# Composition package for protolink
"""
Ways of building Nodes on top of the resolver.

Constructor functions link instances to a shared prototype.
Mixins copy values into a target instead of linking it.
"""
