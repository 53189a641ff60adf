import sys

from kcard.app.main import main

sys.exit(main())
