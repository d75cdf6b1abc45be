"""backsync - One-way, timestamp-based directory synchronizer.

Compares a read-only source tree against a backup tree, flags changes
that look unsafe to overwrite, and propagates approved changes.
"""

__version__ = "0.1.0"
