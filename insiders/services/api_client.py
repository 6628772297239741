"""
Client for the remote loyalty backend.

Every operation here is one HTTP call. Failures surface as BackendError with
the most useful message the response offers; nothing is retried.

Usage:
    async with httpx.AsyncClient(base_url=settings.API_BASE_URL) as http:
        client = BackendClient(http)
        customers = await client.list_customers()
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from insiders.core.config import settings
from insiders.models.errors import BackendError

logger = logging.getLogger(__name__)

# Fields the backend accepts on PUT /customers/{id}
UPDATABLE_FIELDS = [
    "name",
    "email",
    "phone",
    "password",
    "isEmployee",
    "displayId",
    "startDate",
    "endDate",
    "earnedPoints",
    "totalVisits",
    "totalSpend",
    "lastPurchaseDate",
    "internalLoyaltyCustomerId",
    "signUpDate",
    "currentRank",
    "dynamicFields",
]

# Fields sent on POST /customers for an admin add
CREATE_FIELDS = [f for f in UPDATABLE_FIELDS if f != "currentRank"]

Body = Union[Dict[str, Any], List[Any], str]

def read_body(response: httpx.Response) -> Body:
    """JSON when the body parses as JSON, otherwise the raw text."""
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text

def error_message(body: Body, default: str) -> str:
    """Best-effort human readable message from an error body."""
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return default
    if isinstance(body, str) and body.strip():
        return body.strip()
    return default

class BackendClient:
    """
    Thin wrapper over an httpx.AsyncClient pointed at the backend origin.
    The caller owns the httpx client and its lifetime.
    """

    def __init__(self, http: httpx.AsyncClient, prefix: Optional[str] = None):
        self._http = http
        self._prefix = (settings.API_PREFIX if prefix is None else prefix).rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self._prefix}{path}"

    async def _request(self, method: str, path: str, default_error: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise BackendError(f"{default_error}: {e}") from e

        if response.is_error:
            message = error_message(read_body(response), f"{default_error} ({response.status_code})")
            logger.warning("%s %s returned %d: %s", method, path, response.status_code, message)
            raise BackendError(message, status_code=response.status_code)

        return response

    # --- Customer auth ---

    async def signup(
        self,
        name: str,
        email: str,
        password: str,
        phone: str,
        is_employee: bool = False,
    ) -> Body:
        response = await self._request(
            "POST",
            "/customers",
            "Failed to sign up",
            json={"name": name, "email": email, "password": password, "phone": phone, "isEmployee": is_employee},
        )
        return read_body(response)

    async def login(self, email: str, password: str) -> Body:
        response = await self._request(
            "POST",
            "/auth/customer-login",
            "Invalid customer credentials",
            data={"email": email, "password": password},
        )
        return read_body(response)

    async def forgot_password(self, email: str) -> Body:
        response = await self._request(
            "POST", "/auth/forgot-password", "Failed to send reset link", json={"email": email}
        )
        return read_body(response)

    async def reset_password(self, token: str, new_password: str) -> Body:
        response = await self._request(
            "POST",
            "/auth/reset-password",
            "Failed to reset password",
            json={"token": token, "newPassword": new_password},
        )
        return read_body(response)

    # --- Admin auth ---

    async def admin_login(self, email: str, password: str) -> Body:
        response = await self._request(
            "POST",
            "/auth/signin",
            "Invalid admin credentials",
            data={"email": email, "password": password},
        )
        body = read_body(response)
        # Some backend revisions answer with an empty body
        if not body:
            return {"message": "Login successful"}
        return body

    # --- Customer CRUD ---

    async def list_customers(self) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/customers", "Failed to fetch customers")
        body = read_body(response)
        if isinstance(body, dict) and "data" in body:
            body = body["data"]
        if not isinstance(body, list):
            raise BackendError("Invalid data from server.", status_code=response.status_code)
        return body

    async def get_customer(self, customer_id: Any) -> Dict[str, Any]:
        response = await self._request("GET", f"/customers/{customer_id}", "Failed to fetch customer")
        body = read_body(response)
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            return body["data"]
        if not isinstance(body, dict):
            raise BackendError("Invalid data from server.", status_code=response.status_code)
        return body

    async def add_customer(self, customer: Dict[str, Any]) -> Body:
        payload = {k: customer.get(k) for k in CREATE_FIELDS if customer.get(k) is not None}
        payload.setdefault("isEmployee", False)
        response = await self._request("POST", "/customers", "Failed to add customer", json=payload)
        return read_body(response)

    async def update_customer(self, customer_id: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
        payload = {k: changes[k] for k in UPDATABLE_FIELDS if changes.get(k) is not None}
        response = await self._request(
            "PUT", f"/customers/{customer_id}", "Failed to update customer", json=payload
        )
        body = read_body(response)
        if isinstance(body, dict):
            return body
        return {"message": body or "Customer updated successfully", "success": True}

    async def delete_customer(self, customer_id: Any) -> Dict[str, Any]:
        await self._request("DELETE", f"/customers/{customer_id}", "Failed to delete customer")
        return {"message": "Customer deleted successfully."}

    async def delete_all_customers(self) -> Dict[str, Any]:
        await self._request("DELETE", "/customers", "Failed to delete all customers")
        return {"message": "All customers deleted successfully."}

    # --- Import ---

    async def upload_csv(self, filename: str, content: bytes, content_type: Optional[str] = None) -> Body:
        """
        Posts the file as multipart field "file". The response envelope varies
        by backend revision and is returned untouched.
        """
        files = {"file": (filename, content, content_type or "application/octet-stream")}
        response = await self._request("POST", "/customers/upload-csv", "Failed to upload CSV", files=files)
        body = read_body(response)
        logger.debug("CSV upload response: %r", body)
        if isinstance(body, str):
            return {"message": body or "Upload successful", "success": True}
        return body
