"""
protolink CLI entry point.

Usage:
    python -m protolink.cli scenarios
    python -m protolink.cli run <name>
    python -m protolink.cli inspect <name>
    python -m protolink.cli hash <sender> <recipient>
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
