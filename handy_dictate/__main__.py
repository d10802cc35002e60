import sys

from handy_dictate.cli import main

sys.exit(main())
