"""Package entrypoint code (executed by a ‘python -m switch_parser’ command line).

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import sys

if __name__ == "__main__":
    from .main import main

    exit_code = main()
    sys.exit(exit_code)
