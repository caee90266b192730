import sys

from rust_demangler.cli import main

sys.exit(main())
