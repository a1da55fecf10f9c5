import sys

from monobump.cli import main

sys.exit(main())
