"""Allow ``python -m billios``."""

import sys

from billios.cli import main

sys.exit(main())
