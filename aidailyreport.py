#!/usr/bin/env python
"""
Thin wrapper script to invoke the vc_daily_report CLI.

Running ``python aidailyreport.py`` is equivalent to running the
``aidailyreport`` console script installed via ``pyproject.toml``.
"""

from vc_daily_report.cli import main


if __name__ == "__main__":
    main(prog_name="aidailyreport")
