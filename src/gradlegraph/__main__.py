import sys

from gradlegraph.cli import main

sys.exit(main())
