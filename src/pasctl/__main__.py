import sys

from pasctl.cli import main

sys.exit(main())
