"""LocalStore: local data store and query layer for scraped conversations."""
