import sys

from extmodel.cli import main

sys.exit(main())
