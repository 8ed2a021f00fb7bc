from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ResellerDTO:
    id: int
    user_id: int
    business_name: str
    business_type: str
    phone: str
    email: str
    city: str
    state: str
    pincode: str
    bank_account_name: str
    bank_account_number: str
    bank_ifsc: str
    upi_id: str
    is_verified: bool
    is_active: bool
    commission_rate: str
    total_orders: int
    total_earnings: str
    pending_earnings: str
    created_at: Optional[str] = None


@dataclass
class ResellerOrderDTO:
    id: int
    order_number: str
    status: str
    total_amount: str
    reseller_commission: str
    created_at: Optional[str]


@dataclass
class ResellerDashboardDTO:
    total_orders: int
    pending_orders: int
    total_earnings: str
    pending_earnings: str
    this_month_earnings: str
    last_month_earnings: str
    recent_orders: List[ResellerOrderDTO] = field(default_factory=list)
