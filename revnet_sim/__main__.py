"""
Entry point for running revnet_sim as a module.

Usage:
    python -m revnet_sim.cli single --days 365
"""

import sys
from .cli import main

if __name__ == "__main__":
    # Forward to the CLI when invoked as `python -m revnet_sim cli ...`
    if len(sys.argv) > 1 and sys.argv[1] == "cli":
        sys.argv.pop(1)
        sys.exit(main())
    else:
        print("Revnet Simulation Package")
        print("Usage:")
        print("  python -m revnet_sim.cli single --help")
        print("  python -m revnet_sim.cli sweep --tax-intensity 0.0 0.5 1.0")
