import sys

from watchrun.cli import main


sys.exit(main())
