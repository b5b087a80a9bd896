from receiptdesk.a.models.storage import StorageEntryModel  # noqa: F401
