"""
File Pusher — watched-folder stabilization and archiving.

Scans watched folders, waits for each child entry to stop changing, and
packages stable directory trees into .tbz2 archives ready for delivery.
"""

__version__ = "0.3.0"
