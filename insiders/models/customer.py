import uuid
from typing import Annotated, Any, Dict, Literal, Union
from pydantic import BaseModel, ConfigDict, Field

TEMP_ID_PREFIX = "tmp-"

CustomerId = Union[int, str]

def new_temporary_id() -> str:
    """Identifier for a record the backend has not confirmed yet."""
    return TEMP_ID_PREFIX + uuid.uuid4().hex

class _CustomerBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: CustomerId

    @property
    def is_temporary(self) -> bool:
        return isinstance(self.id, str) and self.id.startswith(TEMP_ID_PREFIX)

    def to_wire(self) -> Dict[str, Any]:
        """
        Dumps the record with the backend's camelCase keys.
        Feeding the result back through reconciliation reproduces the record.
        """
        return self.model_dump(by_alias=True, exclude={"kind"})

class FixedCustomer(_CustomerBase):
    kind: Literal["fixed"] = "fixed"

    display_id: str = Field("", alias="displayId")
    current_rank: str = Field("", alias="currentRank")
    internal_loyalty_customer_id: str = Field("", alias="internalLoyaltyCustomerId")

    name: str = ""
    phone: str = ""
    email: str = ""

    # ISO-like strings as sent by the backend
    sign_up_date: str = Field("", alias="signUpDate")
    last_purchase_date: str = Field("", alias="lastPurchaseDate")
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")

    earned_points: int = Field(0, ge=0, alias="earnedPoints")
    total_visits: int = Field(0, ge=0, alias="totalVisits")
    total_spend: float = Field(0.0, ge=0, alias="totalSpend")
    is_employee: bool = Field(False, alias="isEmployee")

class DynamicCustomer(_CustomerBase):
    kind: Literal["dynamic"] = "dynamic"

    # Column name -> value, in the backend's column order
    dynamic_fields: Dict[str, str] = Field(default_factory=dict, alias="dynamicFields")

CustomerRecord = Annotated[Union[FixedCustomer, DynamicCustomer], Field(discriminator="kind")]
