"""Run the analyzer with python -m ftlanalyzer."""

import sys

from ftlanalyzer.cli import main

sys.exit(main())
