"""Order storage for the bundled order-intake endpoint"""

import uuid
from datetime import datetime
from typing import Any, Optional

from ..models.checkout import OrderDraft, OrderStatus, StoredOrder


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, StoredOrder] = {}

    def create_order(self, draft: OrderDraft) -> StoredOrder:
        """Persist a submitted order and assign it an ID"""
        now = datetime.utcnow()
        order = StoredOrder(
            **draft.model_dump(),
            id=uuid.uuid4().hex[:24],
            created_at=now,
            updated_at=now,
        )
        self.orders[order.id] = order
        return order

    def get_order(self, order_id: str) -> Optional[StoredOrder]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def update_order(self, order_id: str, changes: dict[str, Any]) -> Optional[StoredOrder]:
        """Apply already-validated field changes to an order"""
        order = self.get_order(order_id)
        if not order:
            return None

        updated = order.model_copy(update={**changes, "updated_at": datetime.utcnow()})
        self.orders[order_id] = updated
        return updated

    def delete_order(self, order_id: str) -> bool:
        """Delete an order"""
        return self.orders.pop(order_id, None) is not None

    def list_orders(
        self,
        status: Optional[OrderStatus] = None,
        limit: int = 50,
        skip: int = 0,
    ) -> tuple[list[StoredOrder], int]:
        """List orders newest first, returning the page and the total match count"""
        orders = [o for o in self.orders.values() if status is None or o.status == status]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[skip:skip + limit], len(orders)
