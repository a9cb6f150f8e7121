import sys

from logpull_exporter.cli import main

sys.exit(main())
