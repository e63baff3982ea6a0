"""
Portfolio site service.

FastAPI application exposing portfolio projects, contact submissions,
analytics counters and resume content, backed by a SQL database and
S3-compatible object storage, with a local fallback when neither is
configured.
"""
