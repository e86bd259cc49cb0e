# backend/dashboard.py — chart-ready figures produced by OrderService.get_dashboard_data
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from .models import Product


@dataclass
class DeliveryStats:
    delivered_today: int = 0
    due_today: int = 0
    due_tomorrow: int = 0
    not_available_today: int = 0
    new_orders: int = 0


@dataclass
class DashboardData:
    delivery_stats: DeliveryStats = field(default_factory=DeliveryStats)
    # one slot per day of the month, None where nothing was delivered
    deliveries_this_month: List[Optional[int]] = field(default_factory=list)
    # one slot per month
    deliveries_this_year: List[Optional[int]] = field(default_factory=list)
    # rows: requested year, year - 1, year - 2; columns: months
    sales_per_month: List[List[Optional[int]]] = field(default_factory=list)
    product_deliveries: Dict[Product, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "delivery_stats": asdict(self.delivery_stats),
            "deliveries_this_month": list(self.deliveries_this_month),
            "deliveries_this_year": list(self.deliveries_this_year),
            "sales_per_month": [list(row) for row in self.sales_per_month],
            "product_deliveries": [
                {"product_id": p.id, "product": p.name, "deliveries": count}
                for p, count in self.product_deliveries.items()
            ],
        }
