"""Allow ``python -m rcf``."""

import sys

from rcf.app import main

sys.exit(main())
