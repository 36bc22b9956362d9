# klippy main CLI entry point
#  Inspect tags, manifests and build commands of images on a registry v2

import sys

from klippy.modules.cli import main

if __name__ == "__main__":
    sys.exit(main())
