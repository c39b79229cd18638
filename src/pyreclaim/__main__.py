"""Allow running pyreclaim with ``python -m pyreclaim``."""

import sys

from pyreclaim.cli import main

sys.exit(main())
