import sys

from termfolio.cli import main

sys.exit(main())
