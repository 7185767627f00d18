# dataclass models mirrored from backend json

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
REVIEW_STATUSES = ("pending", "approved", "rejected")
USER_ROLES = ("admin", "manager", "viewer")
COUPON_TYPES = ("flat", "percentage")

SETTINGS_IMAGE_FIELDS = (
    "homepageImage1",
    "homepageImage2",
    "homepageImage3",
    "salesImage1",
    "salesImage2",
)
# homepageImage1 may hold a video
SETTINGS_VIDEO_FIELD = "homepageImage1"


def _id(raw: Dict[str, Any]) -> str:
    return str(raw.get("_id") or raw.get("id") or "")


def _float(val, default: float = 0.0) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _int(val, default: int = 0) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def _opt_float(val) -> Optional[float]:
    return None if val in (None, "") else _float(val)


def _opt_int(val) -> Optional[int]:
    return None if val in (None, "") else _int(val)


def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _ref(val) -> Tuple[str, str]:
    """(id, name) of a reference the backend may or may not have populated."""
    if isinstance(val, dict):
        return _id(val), val.get("name") or val.get("title") or ""
    return str(val or ""), ""


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: str  # "admin", "manager" or "viewer"
    is_active: bool = True

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "User":
        return cls(
            id=_id(raw),
            name=raw.get("name") or "",
            email=raw.get("email") or "",
            role=raw.get("role") or "viewer",
            is_active=bool(raw.get("isActive", True)),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class Coupon:
    id: str
    code: str
    type: str  # "flat" or "percentage"
    value: float
    min_amount: Optional[float] = None
    max_discount: Optional[float] = None
    usage_limit: Optional[int] = None
    used_count: int = 0
    expires_at: Optional[str] = None
    is_stackable: bool = False
    is_active: bool = True

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Coupon":
        return cls(
            id=_id(raw),
            code=raw.get("code") or "",
            type=raw.get("type") or "percentage",
            value=_float(raw.get("value")),
            min_amount=_opt_float(raw.get("minAmount")),
            max_discount=_opt_float(raw.get("maxDiscount")),
            usage_limit=_opt_int(raw.get("usageLimit")),
            used_count=_int(raw.get("usedCount")),
            expires_at=raw.get("expiresAt") or None,
            is_stackable=bool(raw.get("isStackable", False)),
            is_active=bool(raw.get("isActive", True)),
        )

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "_id": self.id,
                "code": self.code,
                "type": self.type,
                "value": self.value,
                "minAmount": self.min_amount,
                "maxDiscount": self.max_discount,
                "usageLimit": self.usage_limit,
                "usedCount": self.used_count,
                "expiresAt": self.expires_at,
                "isStackable": self.is_stackable,
                "isActive": self.is_active,
            }
        )


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    email: str
    total_orders: int = 0
    total_spent: float = 0.0
    is_banned: bool = False
    notes: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Customer":
        return cls(
            id=_id(raw),
            name=raw.get("name") or "",
            email=raw.get("email") or "",
            total_orders=_int(raw.get("totalOrders")),
            total_spent=_float(raw.get("totalSpent")),
            is_banned=bool(raw.get("isBanned", False)),
            notes=raw.get("notes") or "",
            created_at=raw.get("createdAt"),
        )

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "_id": self.id,
                "name": self.name,
                "email": self.email,
                "totalOrders": self.total_orders,
                "totalSpent": self.total_spent,
                "isBanned": self.is_banned,
                "notes": self.notes,
                "createdAt": self.created_at,
            }
        )


@dataclass(frozen=True)
class OrderItem:
    product_title: str
    quantity: int
    price: float

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "OrderItem":
        product = raw.get("product")
        if isinstance(product, dict):
            title = product.get("title") or product.get("name") or ""
        else:
            title = str(product or raw.get("title") or "")
        return cls(
            product_title=title,
            quantity=_int(raw.get("quantity"), 1),
            price=_float(raw.get("price")),
        )


@dataclass(frozen=True)
class Order:
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    total: float
    status: str
    items: Tuple[OrderItem, ...] = ()
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Order":
        # customer is populated by the backend, but may come back as a bare id
        customer = raw.get("customer")
        if not isinstance(customer, dict):
            customer = {}
        return cls(
            id=_id(raw),
            order_number=str(raw.get("orderNumber") or ""),
            customer_name=customer.get("name") or "",
            customer_email=customer.get("email") or "",
            total=_float(raw.get("total")),
            status=raw.get("status") or "pending",
            items=tuple(OrderItem.from_json(i) for i in raw.get("items") or []),
            tracking_number=raw.get("trackingNumber") or None,
            carrier=raw.get("carrier") or None,
            created_at=raw.get("createdAt"),
        )

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "_id": self.id,
                "orderNumber": self.order_number,
                "status": self.status,
                "total": self.total,
                "trackingNumber": self.tracking_number,
                "carrier": self.carrier,
            }
        )


@dataclass(frozen=True)
class Review:
    id: str
    product_title: str
    customer_name: str
    rating: int
    comment: str
    status: str
    admin_response: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Review":
        product = raw.get("product") if isinstance(raw.get("product"), dict) else {}
        customer = raw.get("customer") if isinstance(raw.get("customer"), dict) else {}
        return cls(
            id=_id(raw),
            product_title=product.get("title") or "",
            customer_name=customer.get("name") or "",
            rating=min(max(_int(raw.get("rating")), 1), 5),
            comment=raw.get("comment") or "",
            status=raw.get("status") or "pending",
            admin_response=raw.get("adminResponse") or None,
        )

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "_id": self.id,
                "status": self.status,
                "adminResponse": self.admin_response,
            }
        )


@dataclass(frozen=True)
class CarouselImage:
    id: str
    image_url: str
    order: int
    title: str = ""
    is_active: bool = True

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "CarouselImage":
        return cls(
            id=_id(raw),
            image_url=raw.get("imageUrl") or "",
            order=_int(raw.get("order")),
            title=raw.get("title") or "",
            is_active=bool(raw.get("isActive", True)),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "imageUrl": self.image_url,
            "order": self.order,
            "title": self.title,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str = ""
    image: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Category":
        return cls(
            id=_id(raw),
            name=raw.get("name") or "",
            description=raw.get("description") or "",
            image=raw.get("image") or None,
            is_active=bool(raw.get("isActive", True)),
        )

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "_id": self.id,
                "name": self.name,
                "description": self.description,
                "image": self.image,
                "isActive": self.is_active,
            }
        )


@dataclass(frozen=True)
class Product:
    """
    Catalog entry. Variants and their options are edited on the storefront
    tooling, here they only feed the stock total.
    """

    id: str
    title: str
    base_price: float
    base_sku: str = ""
    category_id: str = ""
    category: str = ""  # display name, empty when not populated
    description: str = ""
    images: Tuple[str, ...] = ()
    stock: int = 0
    is_active: bool = True
    created_at: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Product":
        category_id, category_name = _ref(raw.get("category"))
        variants = [v for v in raw.get("variants") or [] if isinstance(v, dict)]
        if variants:
            stock = sum(_int(v.get("stock")) for v in variants)
        else:
            stock = _int(raw.get("stock"))
        return cls(
            id=_id(raw),
            title=raw.get("title") or raw.get("name") or "",
            base_price=_float(raw.get("basePrice", raw.get("price"))),
            base_sku=raw.get("baseSku") or "",
            category_id=category_id,
            category=category_name,
            description=raw.get("description") or "",
            images=tuple(str(i) for i in raw.get("images") or []),
            stock=stock,
            is_active=bool(raw.get("isActive", True)),
            created_at=raw.get("createdAt"),
        )

    def to_json(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "_id": self.id,
                "title": self.title,
                "basePrice": self.base_price,
                "baseSku": self.base_sku,
                "category": self.category_id or None,
                "description": self.description,
                "isActive": self.is_active,
            }
        )


@dataclass(frozen=True)
class SubCategory:
    id: str
    name: str
    category_id: str
    category: str = ""  # display name, empty when not populated

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "SubCategory":
        category_id, category_name = _ref(raw.get("category"))
        return cls(
            id=_id(raw),
            name=raw.get("name") or "",
            category_id=category_id,
            category=category_name,
        )

    def to_json(self) -> Dict[str, Any]:
        return {"_id": self.id, "name": self.name, "category": self.category_id}

@dataclass(frozen=True)
class Settings:
    """
    Store wide key/value bag, persisted as a single backend resource.
    ``raw`` keeps keys this dashboard does not edit so a save does not drop them.
    """

    currency: str = "USD"
    store_name: str = ""
    images: Dict[str, str] = field(default_factory=dict)
    homepage_image1_type: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Settings":
        return cls(
            currency=raw.get("currency") or "USD",
            store_name=raw.get("storeName") or "",
            images={k: raw[k] for k in SETTINGS_IMAGE_FIELDS if raw.get(k)},
            homepage_image1_type=raw.get("homepageImage1Type") or None,
            raw=dict(raw),
        )

    def to_json(self) -> Dict[str, Any]:
        out = dict(self.raw)
        out.update(
            {
                "currency": self.currency,
                "storeName": self.store_name,
                "homepageImage1Type": self.homepage_image1_type,
            }
        )
        for key in SETTINGS_IMAGE_FIELDS:
            out[key] = self.images.get(key, "")
        return _drop_none(out)


@dataclass(frozen=True)
class DashboardStats:
    total_products: int
    total_orders: int
    total_customers: int
    total_stock: int
    monthly_revenue: float
    recent_orders: Tuple[Order, ...] = ()
    low_stock_count: int = 0

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "DashboardStats":
        return cls(
            total_products=_int(raw.get("totalProducts")),
            total_orders=_int(raw.get("totalOrders")),
            total_customers=_int(raw.get("totalCustomers")),
            total_stock=_int(raw.get("totalStock")),
            monthly_revenue=_float(raw.get("monthlyRevenue")),
            recent_orders=tuple(
                Order.from_json(o) for o in raw.get("recentOrders") or []
            ),
            low_stock_count=len(raw.get("lowStockProducts") or []),
        )


@dataclass(frozen=True)
class UploadResult:
    url: str
    file_type: str = "image"  # "image" or "video"
