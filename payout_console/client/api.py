"""Async HTTP client for the payout console REST API."""

from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from payout_console.core.config import Settings
from payout_console.core.errors import PayoutConsoleError
from payout_console.core.logging import LoggerMixin
from payout_console.domain.models.payout import (
    DecisionType,
    FundsSnapshot,
    Payout,
    PayoutDecision,
    PayoutWithDetails,
)
from payout_console.schemas.decision import DecisionRequest

_PAYOUT_LIST = TypeAdapter(list[Payout])
_SNAPSHOT = TypeAdapter(FundsSnapshot)
_DETAILS = TypeAdapter(PayoutWithDetails)
_DECISION = TypeAdapter(PayoutDecision)


class ApiRequestError(PayoutConsoleError):
    """Raised by the client when a request fails or the API reports an error.

    ``code`` carries the server's error code when one was returned.
    """

    def __init__(
        self,
        message: str,
        code: str = "REQUEST_FAILED",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.code = code
        self.status_code = status_code


class PayoutApiClient(LoggerMixin):
    """Typed wrapper around the REST endpoints.

    Every response is unwrapped from the ``{success, data, error}`` envelope;
    failures become ``ApiRequestError`` with the server's message when there
    is one, otherwise with a per-endpoint fallback message.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "PayoutApiClient":
        return cls(
            base_url=settings.client.base_url,
            timeout=settings.client.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "PayoutApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_payouts(self, status: str = "all") -> list[Payout]:
        params = {"status": status} if status and status != "all" else {}
        return await self._request(
            "GET", "/payouts", "Failed to fetch payouts", _PAYOUT_LIST, params=params
        )

    async def get_snapshot(self) -> FundsSnapshot:
        return await self._request(
            "GET", "/payouts/snapshot", "Failed to fetch snapshot", _SNAPSHOT
        )

    async def get_payout(self, payout_id: str) -> PayoutWithDetails:
        return await self._request(
            "GET", f"/payouts/{payout_id}", "Failed to fetch payout details", _DETAILS
        )

    async def create_decision(
        self,
        payout_id: str,
        decision: DecisionType,
        decided_by: str,
        reason: str | None = None,
    ) -> PayoutDecision:
        body = DecisionRequest(decision=decision.value, reason=reason, decided_by=decided_by)
        return await self._request(
            "POST",
            f"/decisions/{payout_id}",
            "Failed to create decision",
            _DECISION,
            json=_dump(body),
        )

    async def _request(
        self,
        method: str,
        path: str,
        fallback_message: str,
        adapter: TypeAdapter[Any],
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            self.logger.warning("API request failed", method=method, path=path, error=str(exc))
            raise ApiRequestError(fallback_message, code="NETWORK_ERROR") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiRequestError(
                fallback_message, code="INVALID_RESPONSE", status_code=response.status_code
            ) from exc

        if not isinstance(payload, dict):
            raise ApiRequestError(
                fallback_message, code="INVALID_RESPONSE", status_code=response.status_code
            )

        if not response.is_success or not payload.get("success"):
            error = payload.get("error")
            if not isinstance(error, dict):
                error = {}
            self.logger.info(
                "API returned an error",
                method=method,
                path=path,
                status=response.status_code,
                code=error.get("code"),
            )
            raise ApiRequestError(
                error.get("message") or fallback_message,
                code=error.get("code") or "REQUEST_FAILED",
                status_code=response.status_code,
                details=error.get("details"),
            )

        try:
            return adapter.validate_python(payload.get("data"))
        except ValidationError as exc:
            self.logger.warning(
                "API response did not match the expected shape",
                method=method,
                path=path,
                errors=exc.error_count(),
            )
            raise ApiRequestError(
                fallback_message, code="INVALID_RESPONSE", status_code=response.status_code
            ) from exc


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
