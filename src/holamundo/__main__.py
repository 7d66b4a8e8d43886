# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Allow running the service with python -m holamundo."""

import sys

from holamundo.main import main

if __name__ == "__main__":  # pragma: nocover
    sys.exit(main())
