import sys

from securepass.cli import main

sys.exit(main())
