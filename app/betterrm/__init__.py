"""better-rm - a safer replacement for rm.

Blocks removal of protected system paths, preserves the filesystem root,
can divert deletions into a trash directory and records every attempt
to an audit trail.
"""

__version__ = "1.0.0"
