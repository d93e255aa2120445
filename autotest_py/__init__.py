"""autotest_py - client and session tracker for the autotester grading service."""

__version__ = "1.0.0"
