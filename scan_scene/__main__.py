import sys

from scan_scene.cli import main

sys.exit(main())
