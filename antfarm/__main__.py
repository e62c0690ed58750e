import sys

from antfarm.cli import main

sys.exit(main())
