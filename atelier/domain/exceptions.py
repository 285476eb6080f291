"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ReceiptAlreadyIssuedError(Exception):
    """Raised when a receipt is requested for a quote that already has one."""

    def __init__(self, quote_id: str, receipt_number: str):
        self.quote_id = quote_id
        self.receipt_number = receipt_number
        super().__init__(
            f"Quote '{quote_id}' already has receipt '{receipt_number}'"
        )


class RemoteStoreError(Exception):
    """Raised when the remote mirror rejects or fails a request.

    Backend-agnostic — works for the SQL database and PostgREST adapters.
    """

    def __init__(self, backend: str, operation: str, message: str):
        self.backend = backend
        self.operation = operation
        self.message = message
        super().__init__(f"[{backend}] {operation}: {message}")
