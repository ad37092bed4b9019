"""Services built on the confidence model."""
