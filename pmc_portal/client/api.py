"""HTTP client for the portal REST API."""
import logging
from typing import Any, Callable
import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        # Validation errors: report the first failing field.
        first = detail[0] if detail else {}
        return str(first.get("msg", "Invalid request"))
    if detail:
        return str(detail)
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


class PortalApi:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token_provider: Callable[[], str | None] | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 30,
    ):
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._token_provider = token_provider

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(0, "Unable to reach the server") from exc
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        if not response.content:
            return None
        if response.headers.get("content-type", "").startswith("application/json"):
            return response.json()
        return response.content

    # Authentication

    def request_login_otp(self, email: str) -> dict:
        return self._request("GET", "/OtpAttempt/generate", params={"emailAddress": email})

    def verify_login_otp(self, email: str, otp: str) -> dict:
        return self._request("POST", "/Auth/verify-otp", json={"email": email, "otp": otp})

    def officer_login(self, email: str, password: str) -> dict:
        return self._request("POST", "/Auth/token", json={"email": email, "password": password})

    def logout(self) -> dict:
        return self._request("POST", "/Auth/logout")

    def session(self) -> dict:
        return self._request("GET", "/Auth/session")

    # Applications

    def create_application(self, payload: dict) -> dict:
        return self._request("POST", "/Application/create", json=payload)

    def resubmit_application(self, application_id: int, payload: dict) -> dict:
        return self._request("POST", f"/Application/{application_id}/resubmit", json=payload)

    def list_applications(self, page_number: int = 1, page_size: int = 10, **filters) -> dict:
        body = {"pageNumber": page_number, "pageSize": page_size}
        body.update({k: v for k, v in filters.items() if v is not None})
        return self._request("POST", "/Application/list", json=body)

    def pending_applications(self, page_number: int = 1, page_size: int = 10) -> dict:
        return self._request(
            "GET", "/Application/pending", params={"pageNumber": page_number, "pageSize": page_size}
        )

    def get_application(self, application_id: int) -> dict:
        return self._request("GET", f"/Application/{application_id}")

    def application_history(self, application_id: int) -> list[dict]:
        return self._request("GET", f"/Application/{application_id}/history")

    def application_rejections(self, application_id: int) -> list[dict]:
        return self._request("GET", f"/Application/{application_id}/rejections")

    def download_certificate(self, application_id: int) -> bytes:
        return self._request("GET", f"/Application/{application_id}/certificate")

    def download_recommended_form(self, application_id: int) -> bytes:
        return self._request("GET", f"/Application/{application_id}/recommended-form")

    # Officer actions

    def generate_action_otp(self, application_id: int, officer_id: int | None) -> dict:
        return self._request(
            "POST", "/Application/generate-otp", json={"applicationId": application_id, "officerId": officer_id}
        )

    def officer_action(self, endpoint: str, payload: dict) -> dict:
        return self._request("POST", f"/Application/{endpoint}", json=payload)

    # Payments

    def initiate_payment(self, application_id: int) -> dict:
        return self._request("POST", "/Payment/initiate", json={"applicationId": application_id})

    def challan(self, application_id: int) -> dict:
        return self._request("GET", f"/Payment/challan/{application_id}")
