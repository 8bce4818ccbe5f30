"""Allow ``python -m buildversion``."""

import sys

from buildversion.cli import main

sys.exit(main())
