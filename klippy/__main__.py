import sys

from klippy.modules.cli import main

sys.exit(main())
