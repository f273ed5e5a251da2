"""FastAPI service receiving inquiry webhooks from the marketing site."""
