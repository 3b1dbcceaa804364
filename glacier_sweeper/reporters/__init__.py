"""
Report Generators
=================

Output formatters for sweep progress and results.

Available Reporters
-------------------
CLIReporter
    Rich terminal output: confirmation prompt, live progress and the
    final summary.
JSONReporter
    JSON export of the complete sweep report, one entry per vault and
    one outcome per archive.

Example
-------
>>> from glacier_sweeper.reporters import CLIReporter, JSONReporter
>>>
>>> CLIReporter().report_sweep(report)
>>> JSONReporter(output_path="sweep.json").report(report)
"""

from glacier_sweeper.reporters.cli_reporter import CLIReporter
from glacier_sweeper.reporters.json_reporter import JSONReporter

__all__ = [
    "CLIReporter",
    "JSONReporter",
]
