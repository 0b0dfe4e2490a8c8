#!/usr/bin/env python3
"""ClockVoice - Spoken Timeclock Edits

Entry point for running ClockVoice from a source checkout.
"""

import sys
from pathlib import Path

# Adding src to path for development
sys.path.insert(0, str(Path(__file__).parent / "src"))


def main():
    """Main entry point for ClockVoice."""
    try:
        from clockvoice.cli import main as cli_main
    except ImportError as e:
        print(f"❌ Failed to import ClockVoice: {e}")
        print("💡 Try running: pip install -e .")
        sys.exit(1)
    
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
