"""Allow ``python -m commentguard.cli``."""

import sys

from commentguard.cli import main

sys.exit(main())
