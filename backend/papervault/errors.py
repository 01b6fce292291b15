from typing import Optional


class RegistryError(Exception):
    """Base error; carries the paper id and the operation that failed."""

    def __init__(self, message: str, paper_id: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.paper_id = paper_id
        self.operation = operation

    def __str__(self) -> str:
        base = super().__str__()
        ctx = []
        if self.operation:
            ctx.append(f"op={self.operation}")
        if self.paper_id:
            ctx.append(f"id={self.paper_id}")
        return f"{base} ({', '.join(ctx)})" if ctx else base


class StoreUnavailable(RegistryError):
    pass


class DecodeError(RegistryError):
    pass


class NotFoundError(RegistryError):
    pass


class FormatError(RegistryError):
    pass


class PermissionDenied(RegistryError):
    pass


class InvalidTransition(RegistryError):
    pass
