"""Allow ``python -m cargo_duplicates``."""

import sys

from .cli import main

sys.exit(main())
