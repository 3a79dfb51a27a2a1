from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List, Union, get_args, get_origin

class ApiParams(BaseModel):
    # Unknown keys are rejected so wire-name typos fail before dispatch
    model_config = ConfigDict(extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

def _construct(annotation: Any, value: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union:
        for option in get_args(annotation):
            if option is not type(None):
                return _construct(option, value)
        return value
    if origin is list:
        args = get_args(annotation)
        if args and isinstance(value, list):
            return [_construct(args[0], item) for item in value]
        return value
    if isinstance(annotation, type) and issubclass(annotation, ApiResponse) and isinstance(value, dict):
        return annotation.from_body(value)
    return value

class ApiResponse(BaseModel):
    """
    Typed view over a response body.

    Built with model_construct, so values are never validated or coerced.
    A field the server left out is simply missing from the instance.
    """

    # Fields the API adds later are kept as-is
    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_body(cls, body: Dict[str, Any]):
        values = {}
        for name, value in body.items():
            field = cls.model_fields.get(name)
            values[name] = _construct(field.annotation, value) if field else value
        return cls.model_construct(**values)

    def to_body(self) -> Dict[str, Any]:
        """The body exactly as the API sent it."""
        return self.model_dump(exclude_unset=True, warnings=False)

# Keys

class NewCustomer(ApiParams):
    name: str = Field(min_length=1)
    email: Optional[str] = None

class CreateKeyParams(ApiParams):
    productId: str = Field(min_length=1)
    maxActivations: Optional[str] = None
    expiryDate: Optional[str] = None  # ISO 8601
    customerId: Optional[str] = None
    newCustomer: Optional[NewCustomer] = None
    metadata: Optional[Dict[str, Any]] = None

class CreateKeyResponse(ApiResponse):
    code: int
    key: str

class ActivateKeyParams(ApiParams):
    productId: str = Field(min_length=1)
    licenseKey: str = Field(min_length=1)
    hostId: Optional[str] = None
    deviceTag: Optional[str] = None

class ActivateKeyResponse(ApiResponse):
    code: int
    message: str
    licenseeName: Optional[str] = None
    licenseeEmail: Optional[str] = None

class DeactivateKeyParams(ApiParams):
    productId: str = Field(min_length=1)
    licenseKey: str = Field(min_length=1)
    hostId: Optional[str] = None  # Omit to deactivate every device

class DeactivateKeyResponse(ApiResponse):
    code: int
    message: str

class GetKeyParams(ApiParams):
    productId: str = Field(min_length=1)
    licenseKey: str = Field(min_length=1)

class DeviceDetails(ApiResponse):
    hostId: str
    activationTime: str
    deviceTag: Optional[str] = None
    ipAddress: Optional[str] = None

class LicenseDetails(ApiResponse):
    id: str
    key: str
    productId: str
    maxActivations: int
    activations: int
    devices: List[DeviceDetails]
    activated: bool
    expirationDate: Optional[str] = None

class CustomerDetails(ApiResponse):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    active: bool

class GetKeyData(ApiResponse):
    license: LicenseDetails
    customer: Optional[CustomerDetails] = None

class GetKeyResponse(ApiResponse):
    code: int
    data: GetKeyData

class BlockKeyParams(ApiParams):
    productId: str = Field(min_length=1)
    licenseKey: str = Field(min_length=1)

class BlockKeyResponse(ApiResponse):
    code: int
    message: str

class UnblockKeyParams(ApiParams):
    productId: str = Field(min_length=1)
    licenseKey: str = Field(min_length=1)

class UnblockKeyResponse(ApiResponse):
    code: int
    message: str

# Customers

class Customer(ApiResponse):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None

class CreateCustomerParams(ApiParams):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)

class CreateCustomerData(ApiResponse):
    id: str
    name: str
    email: str

class CreateCustomerResponse(ApiResponse):
    action: str
    status: bool
    message: str
    data: CreateCustomerData
    code: int

class GetAllCustomersParams(ApiParams):
    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    email: Optional[str] = None

class PaginationMeta(ApiResponse):
    total: int
    page: int
    limit: int
    totalPages: int

class GetAllCustomersResponse(ApiResponse):
    action: str
    status: bool
    data: List[Customer]
    meta: PaginationMeta
    code: int

class GetCustomerByIdParams(ApiParams):
    customerId: str = Field(min_length=1)

class GetCustomerByIdResponse(ApiResponse):
    action: str
    status: bool
    data: List[Customer]
    code: int

class GetCustomerWithKeysParams(ApiParams):
    customerId: str = Field(min_length=1)

class CustomerWithKeys(ApiResponse):
    customer: Customer
    licenseKeys: List[Dict[str, Any]]

class GetCustomerWithKeysResponse(ApiResponse):
    action: str
    status: bool
    data: CustomerWithKeys
    code: int

class UpdateCustomerParams(ApiParams):
    customerId: str = Field(min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    active: Optional[bool] = None

class UpdateCustomerResponse(ApiResponse):
    action: str
    status: bool
    message: str
    data: Optional[Customer] = None
    code: int

class ToggleCustomerStatusParams(ApiParams):
    customerId: str = Field(min_length=1)

class ToggleCustomerStatusResponse(ApiResponse):
    action: str
    status: bool
    message: str
    code: int

class DeleteCustomerParams(ApiParams):
    customerId: str = Field(min_length=1)

class DeleteCustomerResponse(ApiResponse):
    action: str
    status: bool
    message: str
    code: int
