#!/usr/bin/env python3
"""
Launch monitor script.

Runs the token launch monitor with the dev.yaml configuration. Pass extra
arguments (e.g. --mark-scam 42) to forward them to the monitor.
"""

import asyncio
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from launchwatch.runner.session import main


if __name__ == "__main__":
    sys.argv = [
        "launchwatch",
        "--config",
        "configs/dev.yaml",
        "--profile",
        "dev",
        *sys.argv[1:],
    ]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nLaunch monitor stopped by user.")
        sys.exit(0)
