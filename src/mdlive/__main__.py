import sys

from mdlive.cli import main

sys.exit(main())
