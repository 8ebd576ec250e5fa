"""rmtop - tiny Redis client aggregating stats from the MONITOR feed."""

APP = "rmtop"
VERSION = "1.3.0"
DESC = "Tiny Redis client for aggregating stats from MONITOR flow"

__version__ = VERSION
