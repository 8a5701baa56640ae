#!/usr/bin/env python3
"""Run the income tax calculator.

This script can be invoked via:
  - python scripts/run_calculator.py 5000 1200:USD
  - python -m scripts.run_calculator
  - incometax (if installed via pip install -e .)

Environment variables:
  EXCHANGE_API_KEY: ExchangeRate-API key (needed for foreign currencies)
  HOME_CURRENCY: currency in which tax is assessed (default: PLN)
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from incometax.main import main as run_main


def main() -> None:
    """Run the income tax calculator."""
    sys.exit(run_main())


if __name__ == "__main__":
    main()
