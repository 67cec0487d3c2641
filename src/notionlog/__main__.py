import sys

from notionlog.cli import main

sys.exit(main())
