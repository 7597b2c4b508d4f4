"""Core installer logic: configuration, status record, steps and pipeline."""
