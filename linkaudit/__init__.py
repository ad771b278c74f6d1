"""LinkAudit: offline, explainable trust assessment for URLs."""

__version__ = "1.0.0"
