"""Static security analysis of shell and Python scripts before they run."""

__version__ = "0.1.0"