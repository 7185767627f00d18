# src/api/crud.py
from __future__ import annotations

import json
import mimetypes
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

from api import models
from api.client import (
    ApiClient,
    ApiError,
    PartialReorderError,
    RequestTimeoutError,
    ValidationError,
)
from utils.config import BATCH_REORDER, UPLOAD_TIMEOUT
from utils.logger import get_logger

_logger = get_logger(__name__)


def _unwrap(payload: Any) -> Any:
    """Backend answers either a bare value or {"data": value}."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _unwrap_list(payload: Any) -> List[Dict[str, Any]]:
    """
    Rows of a collection response. Rows without an id, or repeating one, cannot
    be edited or used as table keys and are skipped.
    """
    data = _unwrap(payload)
    if not isinstance(data, list):
        return []
    rows = [row for row in data if isinstance(row, dict)]
    keyed, seen = [], set()
    for row in rows:
        row_id = row.get("_id") or row.get("id")
        if row_id and row_id not in seen:
            seen.add(row_id)
            keyed.append(row)
    if len(keyed) != len(rows):
        _logger.warning(f"Skipped {len(rows) - len(keyed)} row(s) without a unique id")
    return keyed


def _unwrap_obj(payload: Any) -> Dict[str, Any]:
    data = _unwrap(payload)
    return data if isinstance(data, dict) else {}


# ---------------------------
# Auth & Dashboard
# ---------------------------


async def login(
    client: ApiClient, email: str, password: str
) -> Tuple[str, models.User]:
    """Return (token, user) for valid credentials. Raises ApiError otherwise."""
    payload = await client.request(
        "POST", "/auth/login", json={"email": email, "password": password}
    )
    body = _unwrap_obj(payload)
    token = body.get("token")
    if not token and isinstance(payload, dict):
        token = payload.get("token")
    if not token:
        raise ApiError("Login response did not contain a token")
    user = models.User.from_json(body.get("user") or {"email": email})
    return token, user


async def get_dashboard_stats(client: ApiClient) -> models.DashboardStats:
    payload = await client.request("GET", "/dashboard/stats")
    return models.DashboardStats.from_json(_unwrap_obj(payload))


# ---------------------------
# Products
# ---------------------------


async def get_products(client: ApiClient) -> List[models.Product]:
    payload = await client.request("GET", "/products")
    return [models.Product.from_json(row) for row in _unwrap_list(payload)]


async def create_product(client: ApiClient, data: Dict[str, Any]) -> models.Product:
    """
    Products are sent as a multipart field ``productData`` holding json text,
    the backend appends uploaded ``images`` files to it.
    """
    payload = await client.request(
        "POST", "/products", files={"productData": (None, json.dumps(data))}
    )
    return models.Product.from_json(_unwrap_obj(payload) or data)


async def update_product(
    client: ApiClient, product_id: str, data: Dict[str, Any]
) -> models.Product:
    payload = await client.request(
        "PUT", f"/products/{product_id}", files={"productData": (None, json.dumps(data))}
    )
    return models.Product.from_json(_unwrap_obj(payload) or {"_id": product_id, **data})


async def delete_product(client: ApiClient, product_id: str) -> None:
    await client.request("DELETE", f"/products/{product_id}")


# ---------------------------
# Categories
# ---------------------------


async def get_categories(client: ApiClient) -> List[models.Category]:
    payload = await client.request("GET", "/categories")
    return [models.Category.from_json(row) for row in _unwrap_list(payload)]


async def create_category(client: ApiClient, data: Dict[str, Any]) -> models.Category:
    # multipart form, the backend reads an optional "image" file next to the fields
    fields = {
        key: (None, str(val).lower() if isinstance(val, bool) else str(val))
        for key, val in data.items()
    }
    payload = await client.request("POST", "/categories", files=fields)
    return models.Category.from_json(_unwrap_obj(payload) or data)


async def update_category(
    client: ApiClient, category_id: str, data: Dict[str, Any]
) -> models.Category:
    payload = await client.request("PUT", f"/categories/{category_id}", json=data)
    return models.Category.from_json(_unwrap_obj(payload) or {"_id": category_id, **data})


async def delete_category(client: ApiClient, category_id: str) -> None:
    await client.request("DELETE", f"/categories/{category_id}")


# ---------------------------
# Coupons
# ---------------------------


async def get_coupons(client: ApiClient) -> List[models.Coupon]:
    payload = await client.request("GET", "/coupons")
    return [models.Coupon.from_json(row) for row in _unwrap_list(payload)]


async def create_coupon(client: ApiClient, data: Dict[str, Any]) -> models.Coupon:
    payload = await client.request("POST", "/coupons", json=data)
    return models.Coupon.from_json(_unwrap_obj(payload) or data)


async def update_coupon(
    client: ApiClient, coupon_id: str, data: Dict[str, Any]
) -> models.Coupon:
    payload = await client.request("PUT", f"/coupons/{coupon_id}", json=data)
    return models.Coupon.from_json(_unwrap_obj(payload) or {"_id": coupon_id, **data})


async def delete_coupon(client: ApiClient, coupon_id: str) -> None:
    await client.request("DELETE", f"/coupons/{coupon_id}")


# ---------------------------
# Customers
# ---------------------------


async def get_customers(client: ApiClient) -> List[models.Customer]:
    payload = await client.request("GET", "/customers")
    return [models.Customer.from_json(row) for row in _unwrap_list(payload)]


async def update_customer(
    client: ApiClient, customer_id: str, data: Dict[str, Any]
) -> None:
    await client.request("PUT", f"/customers/{customer_id}", json=data)


async def delete_customer(client: ApiClient, customer_id: str) -> None:
    await client.request("DELETE", f"/customers/{customer_id}")


async def ban_customer(client: ApiClient, customer_id: str, reason: str = "") -> None:
    await client.request(
        "POST", f"/users/admin/ban/{customer_id}", json={"reason": reason}
    )


async def unban_customer(client: ApiClient, customer_id: str) -> None:
    await client.request("POST", f"/users/admin/unban/{customer_id}")


# ---------------------------
# Orders
# ---------------------------


async def get_orders(client: ApiClient) -> List[models.Order]:
    payload = await client.request("GET", "/orders", params={"populate": "customer"})
    return [models.Order.from_json(row) for row in _unwrap_list(payload)]


async def update_order(client: ApiClient, order_id: str, data: Dict[str, Any]) -> None:
    await client.request("PUT", f"/orders/{order_id}", json=data)


async def update_order_status(client: ApiClient, order_id: str, status: str) -> None:
    """Status is a closed set, transitions between them are not checked."""
    if status not in models.ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status!r}")
    await update_order(client, order_id, {"status": status})


async def assign_tracking(
    client: ApiClient, order_id: str, tracking_number: str, carrier: str
) -> None:
    await update_order(
        client, order_id, {"trackingNumber": tracking_number, "carrier": carrier}
    )


# ---------------------------
# Reviews
# ---------------------------


async def get_reviews(client: ApiClient) -> List[models.Review]:
    payload = await client.request("GET", "/reviews")
    return [models.Review.from_json(row) for row in _unwrap_list(payload)]


async def update_review(
    client: ApiClient, review_id: str, data: Dict[str, Any]
) -> None:
    await client.request("PUT", f"/reviews/{review_id}", json=data)


async def set_review_status(client: ApiClient, review_id: str, status: str) -> None:
    if status not in models.REVIEW_STATUSES:
        raise ValueError(f"Unknown review status: {status!r}")
    await update_review(client, review_id, {"status": status})


async def respond_to_review(
    client: ApiClient, review_id: str, response: str, status: Optional[str] = None
) -> None:
    data: Dict[str, Any] = {"adminResponse": response}
    if status:
        data["status"] = status
    await update_review(client, review_id, data)


# ---------------------------
# Admin users
# ---------------------------


async def get_users(client: ApiClient) -> List[models.User]:
    payload = await client.request("GET", "/users")
    return [models.User.from_json(row) for row in _unwrap_list(payload)]


async def create_user(client: ApiClient, data: Dict[str, Any]) -> models.User:
    payload = await client.request("POST", "/users", json=data)
    return models.User.from_json(_unwrap_obj(payload) or data)


async def update_user(client: ApiClient, user_id: str, data: Dict[str, Any]) -> None:
    await client.request("PUT", f"/users/{user_id}", json=data)


async def delete_user(client: ApiClient, user_id: str) -> None:
    await client.request("DELETE", f"/users/{user_id}")


# ---------------------------
# Settings
# ---------------------------


async def get_settings(client: ApiClient) -> models.Settings:
    payload = await client.request("GET", "/settings")
    return models.Settings.from_json(_unwrap_obj(payload))


async def update_settings(client: ApiClient, data: Dict[str, Any]) -> models.Settings:
    """
    Settings are sent as a multipart field ``settingsData`` holding json text.
    """
    payload = await client.request(
        "PUT", "/settings", files={"settingsData": (None, json.dumps(data))}
    )
    body = _unwrap_obj(payload)
    return models.Settings.from_json(body or data)


# ---------------------------
# Carousel images
# ---------------------------


async def get_carousel_images(client: ApiClient) -> List[models.CarouselImage]:
    """Images in display sequence (by ``order``, ties keep server order)."""
    payload = await client.request("GET", "/carousel-images")
    images = [models.CarouselImage.from_json(row) for row in _unwrap_list(payload)]
    return sorted(images, key=lambda img: img.order)


async def create_carousel_image(client: ApiClient, data: Dict[str, Any]) -> None:
    await client.request("POST", "/carousel-images", json=data)


async def update_carousel_image(
    client: ApiClient, image_id: str, data: Dict[str, Any]
) -> None:
    await client.request("PUT", f"/carousel-images/{image_id}", json=data)


async def delete_carousel_image(client: ApiClient, image_id: str) -> None:
    await client.request("DELETE", f"/carousel-images/{image_id}")


async def toggle_carousel_image_status(client: ApiClient, image_id: str) -> None:
    await client.request("PATCH", f"/carousel-images/{image_id}/toggle")


async def reorder_carousel_images(
    client: ApiClient,
    images: Sequence[models.CarouselImage],
    batched: bool = BATCH_REORDER,
) -> int:
    """
    Persist ``images`` as the new display sequence, image i gets order i.

    Batched: one call with the full id list.
    Otherwise one update per image, in sequence. If the k-th update fails,
    PartialReorderError is raised with failed_index=k; images before k already
    carry their new order. Returns the number of images persisted.
    """
    if batched:
        await client.request(
            "PUT", "/carousel-images/reorder", json={"order": [i.id for i in images]}
        )
        return len(images)

    for idx, image in enumerate(images):
        try:
            await update_carousel_image(client, image.id, {"order": idx})
        except ApiError as e:
            _logger.warning(f"Reorder stopped at {idx}/{len(images)} ({image.id})")
            raise PartialReorderError(idx, len(images), e) from e
    return len(images)


# ---------------------------
# Sub-categories
# ---------------------------


async def get_sub_categories(client: ApiClient) -> List[models.SubCategory]:
    payload = await client.request("GET", "/subcategories/public")
    return [models.SubCategory.from_json(row) for row in _unwrap_list(payload)]


async def create_sub_category(
    client: ApiClient, data: Dict[str, Any]
) -> models.SubCategory:
    payload = await client.request("POST", "/subcategories", json=data)
    return models.SubCategory.from_json(_unwrap_obj(payload) or data)


async def update_sub_category(
    client: ApiClient, sub_category_id: str, data: Dict[str, Any]
) -> models.SubCategory:
    payload = await client.request(
        "PUT", f"/subcategories/{sub_category_id}", json=data
    )
    return models.SubCategory.from_json(
        _unwrap_obj(payload) or {"_id": sub_category_id, **data}
    )


async def delete_sub_category(client: ApiClient, sub_category_id: str) -> None:
    await client.request("DELETE", f"/subcategories/{sub_category_id}")


# ---------------------------
# Uploads
# ---------------------------


def check_upload(path: str, max_bytes: int, allow_video: bool = False) -> str:
    """
    Validate a local file before uploading it, returns its mime type.
    Raises ValidationError when missing, too large or of the wrong kind.
    """
    if not os.path.isfile(path):
        raise ValidationError(f"File not found: {path}")

    mime, _ = mimetypes.guess_type(path)
    mime = mime or "application/octet-stream"
    allowed = ("image/", "video/") if allow_video else ("image/",)
    if not mime.startswith(allowed):
        kind = "an image or video" if allow_video else "an image"
        raise ValidationError(f"Please upload {kind} file")

    size = os.path.getsize(path)
    if size > max_bytes:
        raise ValidationError(
            f"File size exceeds {max_bytes // (1024 * 1024)}MB limit. "
            "Please choose a smaller file."
        )
    return mime


async def upload_file(
    client: ApiClient,
    path: str,
    max_bytes: int,
    allow_video: bool = False,
    timeout: float = UPLOAD_TIMEOUT,
) -> models.UploadResult:
    """
    Send a local file as multipart field ``image`` to /upload.
    Returns the absolute url of the stored file and its inferred media type.
    """
    mime = check_upload(path, max_bytes, allow_video)
    with open(path, "rb") as f:
        content = f.read()

    try:
        payload = await client.request(
            "POST",
            "/upload",
            files={"image": (os.path.basename(path), content, mime)},
            timeout=timeout,
        )
    except RequestTimeoutError as e:
        raise ApiError(
            "Upload timeout. The file is too large or connection is slow."
        ) from e

    body = _unwrap_obj(payload)
    url = body.get("imageUrl") or body.get("url") or body.get("path")
    if not url:
        raise ApiError("No URL returned from upload")
    file_type = body.get("fileType") or ("video" if mime.startswith("video/") else "image")
    return models.UploadResult(url=client.absolute_url(url), file_type=file_type)
