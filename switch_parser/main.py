"""Top-level code of the report tool: configures logging and handles errors.

The main() method is called by the package entrypoint code in __main__.py and
by the ‘switch-parser’ console script.

Copyright (C) 2025 Paulo Ferreira de Castro

Licensed under the Open Software License version 3.0, a copy of which can be
found in the LICENSE file.
"""

import logging
import sys
from collections.abc import Sequence

from .config import load_config
from .error import ConfigError, fmt_exception
from .report import format_report, make_report

_LOGGER = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Classify the command line arguments and print the JSON report.

    All arguments are classified, none are options of this tool itself. The
    tool is configured with SWITCH_PARSER_* environment variables instead.
    """
    if argv is None:
        argv = sys.argv[1:]
    try:
        config = load_config()
    except ConfigError as e:
        logging.basicConfig(format="%(levelname)-8s [%(name)s] %(message)s")
        _LOGGER.error(fmt_exception(e, "Exiting with exceptions:"))
        return 1

    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        level=config.log_level,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    _LOGGER.debug("%s: %s", main.__name__, config)

    report = make_report(argv, config)
    print(format_report(report, config))
    return 0
