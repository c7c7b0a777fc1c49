"""gridcalc -- a fixed-size integer spreadsheet with an eager formula engine."""

__version__ = "0.3.0"

from gridcalc.sheet import Spreadsheet  # noqa: E402

__all__ = ["Spreadsheet", "__version__"]
