# CLI package for protolink
"""
Command-line interface for running the object-model scenarios.

Commands:
    protolink scenarios - List scenarios
    protolink run       - Run a scenario
    protolink inspect   - Show a scenario's resulting Node
    protolink hash      - Hash a sender/recipient pair
"""
