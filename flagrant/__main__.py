import sys

from flagrant.cli import main

sys.exit(main())
