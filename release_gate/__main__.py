import sys

from release_gate.cli import main

sys.exit(main())
