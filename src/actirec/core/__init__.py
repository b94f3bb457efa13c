"""Core recording machinery: models, the two streams, and the recorder.

The serial ingestion loop (:mod:`serial_ingest`) and the activity timeline
(:mod:`timeline`) never share state; :mod:`recorder_session` starts the
timeline on its own thread and runs ingestion on the caller's thread.
"""
