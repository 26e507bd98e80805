"""Exit codes for the commentguard CLI.

- 0: Success; in hook mode also "nothing flagged" or "checker unavailable"
- 2: Checker flagged the edit (hook protocol: stderr goes back to the agent)
- 3: Invalid usage (bad arguments, broken config)
- 4: Bootstrap failure (binary could not be installed)
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_FLAGGED = 2
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4
