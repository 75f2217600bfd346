import sys

from metacid.cli import main

sys.exit(main())
