# distroflow/schemas/tenant.py
from pydantic import BaseModel, ConfigDict, Field


class TenantCreate(BaseModel):
    """
    Payload for provisioning a tenant (company + admin user + subscription).

    Fields are accepted as sent (camelCase on the wire); trimming and
    required-field checks happen in TenantService so that every failure
    is reported with the same error body.
    """

    model_config = ConfigDict(populate_by_name=True)

    company_name: str | None = Field(default=None, alias="companyName")
    admin_email: str | None = Field(default=None, alias="adminEmail")
    admin_password: str | None = Field(default=None, alias="adminPassword")
    days_given: float | None = Field(default=None, alias="daysGiven")


class TenantProvisioned(BaseModel):
    """
    Successful provisioning result, serialized in camelCase.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    company_id: str = Field(alias="companyId")
    user_id: str = Field(alias="userId")
    admin_email: str = Field(alias="adminEmail")
    reused_existing_user: bool = Field(alias="reusedExistingUser")
