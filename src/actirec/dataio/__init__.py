"""Data input/output helpers (session layout, label and metadata files).

Utility modules here keep disk-level concerns isolated from the recorder:
- :mod:`file_paths` allocates numbered session directories.
- :mod:`label_writer` appends label events to ``labels.csv``.
- :mod:`subject_info` reads and writes ``chars.txt``.
- :mod:`session_loader` reads a finished session back for offline review.
"""
