# gifty/services/stats_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from gifty.domain.pricing import ZERO, to_money
from gifty.domain.schemas import OrderStatus
from gifty.repos.gift_box_repo import GiftBoxRepo
from gifty.repos.order_repo import OrderRepo
from gifty.repos.product_repo import ProductRepo
from gifty.repos.ready_box_repo import ReadyBoxRepo
from gifty.repos.user_repo import UserRepo
from gifty.utils.settings import LOW_STOCK_THRESHOLD


class StatsService:
    """Read-only numbers for the admin dashboard."""

    def __init__(self, db: Session):
        self.user_repo = UserRepo(db)
        self.order_repo = OrderRepo(db)
        self.product_repo = ProductRepo(db)
        self.ready_box_repo = ReadyBoxRepo(db)
        self.gift_box_repo = GiftBoxRepo(db)

    def get_stats(self) -> Dict[str, Any]:
        orders = self.order_repo.list_all_orders()  # newest first

        total_revenue = sum((to_money(o.total_price) for o in orders), ZERO)

        # most sold, aggregated by the snapshot name
        sold: Dict[str, Dict[str, Any]] = {}
        for order in orders:
            for item in order.items:
                entry = sold.setdefault(item.name, {"name": item.name, "total_sold": 0, "revenue": ZERO})
                entry["total_sold"] += item.quantity
                entry["revenue"] += to_money(item.price) * item.quantity
        most_sold = sorted(sold.values(), key=lambda e: e["total_sold"], reverse=True)[:10]

        status_counts = {s.value: 0 for s in OrderStatus}
        for order in orders:
            status_counts[order.status] = status_counts.get(order.status, 0) + 1

        recent_orders = [
            {
                "id": o.id,
                "total_price": o.total_price,
                "status": o.status,
                "item_count": len(o.items),
                "created_at": o.created_at,
            }
            for o in orders[:5]
        ]

        return {
            "total_users": self.user_repo.count_users(),
            "total_orders": len(orders),
            "total_revenue": total_revenue,
            "total_products": self.product_repo.count_products(),
            "active_products": self.product_repo.count_products(active_only=True),
            "total_ready_boxes": self.ready_box_repo.count_ready_boxes(),
            "active_ready_boxes": self.ready_box_repo.count_ready_boxes(active_only=True),
            "total_gift_boxes": self.gift_box_repo.count_gift_boxes(),
            "low_stock": self.product_repo.list_low_stock(LOW_STOCK_THRESHOLD),
            "most_sold": most_sold,
            "status_counts": status_counts,
            "recent_orders": recent_orders,
        }
