import sys

from barrage.cli import main

sys.exit(main())
