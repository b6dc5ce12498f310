import sys

from passvault.main import main

sys.exit(main())
