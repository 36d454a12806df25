"""Allow ``python -m py_pager``."""

import sys

from py_pager.cli import main

sys.exit(main())
