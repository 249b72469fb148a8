import sys

from kickguard.cli import main

sys.exit(main())
