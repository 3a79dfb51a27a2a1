import logging
from typing import Any, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import ValidationError

from keymint.config import Settings, settings as default_settings
from keymint.errors import (
    ConfigurationError,
    KeyMintApiError,
    UNEXPECTED_RESPONSE_MESSAGE,
    failure_from_exception,
    normalize_error,
)
from keymint.models import (
    ApiParams,
    ApiResponse,
    ActivateKeyParams,
    ActivateKeyResponse,
    BlockKeyParams,
    BlockKeyResponse,
    CreateCustomerParams,
    CreateCustomerResponse,
    CreateKeyParams,
    CreateKeyResponse,
    DeactivateKeyParams,
    DeactivateKeyResponse,
    DeleteCustomerParams,
    DeleteCustomerResponse,
    GetAllCustomersParams,
    GetAllCustomersResponse,
    GetCustomerByIdParams,
    GetCustomerByIdResponse,
    GetCustomerWithKeysParams,
    GetCustomerWithKeysResponse,
    GetKeyParams,
    GetKeyResponse,
    ToggleCustomerStatusParams,
    ToggleCustomerStatusResponse,
    UnblockKeyParams,
    UnblockKeyResponse,
    UpdateCustomerParams,
    UpdateCustomerResponse,
)

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=ApiParams)
R = TypeVar("R", bound=ApiResponse)

ParamsInput = Union[ApiParams, Mapping[str, Any]]


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "params"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


class KeyMintClient:
    """
    Async client for the KeyMint license API.

    Every operation is a single request. Failures of any kind are raised as
    KeyMintApiError; parameters are validated locally before dispatch.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or default_settings

        token = access_token if access_token is not None else settings.KEYMINT_ACCESS_TOKEN
        if not token:
            raise ConfigurationError("Access token is required to initialize the SDK.")

        self.base_url = base_url or settings.KEYMINT_API_URL
        if timeout is None:
            timeout = settings.KEYMINT_TIMEOUT

        client_options = {}
        if timeout is not None:
            client_options["timeout"] = timeout
        if transport is not None:
            client_options["transport"] = transport

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            **client_options,
        )

    async def __aenter__(self) -> "KeyMintClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # Keys

    async def create_key(self, params: ParamsInput) -> CreateKeyResponse:
        """
        Create a new license key, optionally tied to an existing or new customer.
        """
        return await self._call(
            "create_key", "POST", "/key",
            params=params, params_model=CreateKeyParams, response_model=CreateKeyResponse,
        )

    async def activate_key(self, params: ParamsInput) -> ActivateKeyResponse:
        """
        Activate a license key on a device identified by hostId.
        """
        return await self._call(
            "activate_key", "POST", "/key/activate",
            params=params, params_model=ActivateKeyParams, response_model=ActivateKeyResponse,
        )

    async def deactivate_key(self, params: ParamsInput) -> DeactivateKeyResponse:
        """
        Deactivate one device, or every device when hostId is omitted.
        """
        return await self._call(
            "deactivate_key", "POST", "/key/deactivate",
            params=params, params_model=DeactivateKeyParams, response_model=DeactivateKeyResponse,
        )

    async def get_key(self, params: ParamsInput) -> GetKeyResponse:
        """
        Fetch license details (devices, activation counts, customer).
        """
        return await self._call(
            "get_key", "GET", "/key",
            params=params, params_model=GetKeyParams, response_model=GetKeyResponse, query=True,
        )

    async def block_key(self, params: ParamsInput) -> BlockKeyResponse:
        return await self._call(
            "block_key", "POST", "/key/block",
            params=params, params_model=BlockKeyParams, response_model=BlockKeyResponse,
        )

    async def unblock_key(self, params: ParamsInput) -> UnblockKeyResponse:
        return await self._call(
            "unblock_key", "POST", "/key/unblock",
            params=params, params_model=UnblockKeyParams, response_model=UnblockKeyResponse,
        )

    # Customers

    async def create_customer(self, params: ParamsInput) -> CreateCustomerResponse:
        return await self._call(
            "create_customer", "POST", "/customer",
            params=params, params_model=CreateCustomerParams, response_model=CreateCustomerResponse,
        )

    async def get_all_customers(self, params: Optional[ParamsInput] = None) -> GetAllCustomersResponse:
        """
        List customers, paginated with page/limit and optionally filtered by email.
        """
        return await self._call(
            "get_all_customers", "GET", "/customer",
            params=params, params_model=GetAllCustomersParams, response_model=GetAllCustomersResponse,
            query=True,
        )

    async def get_customer_by_id(self, params: ParamsInput) -> GetCustomerByIdResponse:
        return await self._call(
            "get_customer_by_id", "GET", "/customer/by-id",
            params=params, params_model=GetCustomerByIdParams, response_model=GetCustomerByIdResponse,
            query=True,
        )

    async def get_customer_with_keys(self, params: ParamsInput) -> GetCustomerWithKeysResponse:
        """
        Fetch a customer together with all license keys issued to them.
        """
        return await self._call(
            "get_customer_with_keys", "GET", "/customer/keys",
            params=params, params_model=GetCustomerWithKeysParams,
            response_model=GetCustomerWithKeysResponse, query=True,
        )

    async def update_customer(self, params: ParamsInput) -> UpdateCustomerResponse:
        return await self._call(
            "update_customer", "PUT", "/customer/by-id",
            params=params, params_model=UpdateCustomerParams, response_model=UpdateCustomerResponse,
        )

    async def toggle_customer_status(self, params: ParamsInput) -> ToggleCustomerStatusResponse:
        """
        Flip a customer between active and disabled.
        """
        return await self._call(
            "toggle_customer_status", "POST", "/customer/disable",
            params=params, params_model=ToggleCustomerStatusParams,
            response_model=ToggleCustomerStatusResponse,
        )

    async def delete_customer(self, params: ParamsInput) -> DeleteCustomerResponse:
        return await self._call(
            "delete_customer", "DELETE", "/customer/by-id",
            params=params, params_model=DeleteCustomerParams, response_model=DeleteCustomerResponse,
            query=True,
        )

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        params: Optional[ParamsInput],
        params_model: Type[P],
        response_model: Type[R],
        query: bool = False,
    ) -> R:
        validated = self._build_params(operation, params_model, params)

        logger.debug("KeyMint %s: %s %s", operation, method, path)
        try:
            payload = validated.to_payload()
            # Reads and deletes carry their parameters in the query string
            request_options = {"params": payload} if query else {"json": payload}
            response = await self._client.request(method, path, **request_options)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as exc:
            # TypeError/ValueError: the payload could not be encoded, nothing was sent
            error = normalize_error(failure_from_exception(exc))
            logger.warning(
                "KeyMint %s failed: %s (code=%s, status=%s)",
                operation, error.message, error.code, error.status,
            )
            raise error from exc

        # The body is passed through as sent; only its top-level shape is checked
        try:
            body = response.json()
        except ValueError as exc:
            raise self._unexpected_body(operation, response) from exc
        if not isinstance(body, dict):
            raise self._unexpected_body(operation, response)
        return response_model.from_body(body)

    def _unexpected_body(self, operation: str, response: httpx.Response) -> KeyMintApiError:
        logger.warning(
            "KeyMint %s returned a body that is not a JSON object (status=%s)",
            operation, response.status_code,
        )
        return KeyMintApiError(UNEXPECTED_RESPONSE_MESSAGE, code=-1, status=response.status_code)

    def _build_params(
        self, operation: str, params_model: Type[P], params: Optional[ParamsInput]
    ) -> P:
        if isinstance(params, params_model):
            return params
        if isinstance(params, ApiParams):
            params = params.model_dump(exclude_none=True)
        try:
            return params_model.model_validate(params if params is not None else {})
        except ValidationError as exc:
            message = f"Invalid parameters for {operation}: {_describe_validation_error(exc)}"
            logger.warning("KeyMint %s rejected locally: %s", operation, message)
            raise KeyMintApiError(message, code=-1, status=None) from exc
