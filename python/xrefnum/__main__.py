import sys

from xrefnum.cli.__main__ import run_cli

sys.exit(run_cli())
