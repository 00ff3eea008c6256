#!/usr/bin/env python3
"""
CloudWatch Logs Auto-Subscribe - Log Group Subscription Reconciler

Entry point script for running without installation.
For installed usage, run: auto-subscribe
"""

import sys
from pathlib import Path

# Add src to path for direct execution without installation
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from auto_subscribe.cli import main

if __name__ == "__main__":
    main()
