import sys

from quattractor.cli import main

sys.exit(main())
