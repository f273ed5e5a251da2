"""CRM intake: inbound inquiry webhooks and the marketing inquiry store."""

__version__ = "1.0.0"
