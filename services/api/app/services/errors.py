from __future__ import annotations


class EngineError(Exception):
    """Base class for order engine errors."""


class ReferenceNotFoundError(EngineError):
    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvariantViolationError(EngineError):
    """A caller tried to set a field the engine derives on its own."""

    def __init__(self, entity: str, field: str) -> None:
        super().__init__(f"{entity}.{field} is derived and cannot be set directly")
        self.entity = entity
        self.field = field


class OrderNotAppendableError(EngineError):
    def __init__(self, order_id: int, status: str) -> None:
        super().__init__(f"Order {order_id} is {status}; line items can no longer be added")
        self.order_id = order_id
        self.status = status


class InvalidOrderStatusError(EngineError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid order status: {value!r}")
        self.value = value


class TransientStoreError(EngineError):
    """The store failed mid-unit. Nothing was applied; the whole operation may be retried."""

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f"{operation} failed: store unavailable ({cause.__class__.__name__})")
        self.operation = operation
        self.cause = cause
