import sys

from nodeindex.refresh import main

sys.exit(main())
