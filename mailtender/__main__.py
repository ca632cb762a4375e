import sys

from mailtender.main import main

sys.exit(main())
