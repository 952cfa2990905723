import sys

from securepipe.main import main

sys.exit(main())
