"""Configuration objects and helpers for actirec.

A session is configured from an optional YAML file (``recorder.yaml``) whose
keys mirror :class:`~actirec.config.runtime.RecorderConfig`; command-line
flags override whatever the file provides.
"""

from .runtime import RecorderConfig, config_from_mapping, load_config

__all__ = ["RecorderConfig", "config_from_mapping", "load_config"]
