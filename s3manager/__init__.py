"""S3 Manager: a small REST proxy for browsing S3 and S3-compatible storage."""

__version__ = "0.1.0"
