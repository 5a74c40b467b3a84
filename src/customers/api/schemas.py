"""Pydantic request/response schemas for the customer API."""

from __future__ import annotations

from pydantic import BaseModel, StrictBool, StrictStr, field_validator

from customers.customer.customer import Customer, CustomerPreferences, CustomerTier

# --- Request Schemas ---


class PreferencesPayload(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"newsletter": False, "language": "fr-FR"}]},
    }

    newsletter: StrictBool
    language: StrictStr

    def to_preferences(self) -> CustomerPreferences:
        return CustomerPreferences(newsletter=self.newsletter, language=self.language)


class CreateCustomerRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "a@b.com",
                    "tier": "GOLD",
                    "preferences": {"newsletter": False, "language": "fr-FR"},
                }
            ]
        }
    }

    email: StrictStr
    tier: CustomerTier
    preferences: PreferencesPayload

    @field_validator("email")
    @classmethod
    def email_must_contain_at_sign(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


# --- Response Schemas ---


class PreferencesResponse(BaseModel):
    newsletter: bool
    language: str

    @classmethod
    def from_preferences(cls, preferences: CustomerPreferences) -> PreferencesResponse:
        return cls(**preferences.as_payload())


class CustomerResponse(BaseModel):
    id: str
    email: str
    tier: CustomerTier
    preferences: PreferencesResponse

    @classmethod
    def from_customer(cls, customer: Customer) -> CustomerResponse:
        return cls.model_validate(customer.as_payload())


class ErrorResponse(BaseModel):
    error: str
