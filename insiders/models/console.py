from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    password: str
    phone: str = ""
    is_employee: bool = Field(False, alias="isEmployee")

class CredentialsRequest(BaseModel):
    email: str
    password: str

class ForgotPasswordRequest(BaseModel):
    email: str

class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    new_password: str = Field(..., alias="newPassword")

class TableSnapshot(BaseModel):
    columns: List[str]
    customers: List[Dict[str, Any]] = Field(default_factory=list)

class UploadSummary(TableSnapshot):
    source: Optional[str] = None  # "backend" or "fallback"
    count: int = 0

class MessageResponse(BaseModel):
    message: str
    user: Optional[Dict[str, Any]] = None
