"""User and contact inbox models."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from halal_storefront.models.base_models import StoredRecord


class UserProfile(BaseModel):
    """Profile fields shared by user inputs and records."""

    email: str | None = Field(None, description="E-mail address from the identity provider")
    first_name: str | None = Field(None, description="Given name")
    last_name: str | None = Field(None, description="Family name")
    profile_image_url: str | None = Field(None, description="Avatar URL")
    is_restaurant: bool = Field(default=False, description="Whether the user buys for a restaurant")
    restaurant_name: str | None = Field(None, description="Restaurant name")
    restaurant_address: str | None = Field(None, description="Restaurant delivery address")
    phone_number: str | None = Field(None, description="Contact phone number")


class UpsertUser(UserProfile):
    """Full user data delivered by an identity event (login)."""

    id: str = Field(..., description="Identity provider subject identifier", min_length=1)


class UserUpdate(BaseModel):
    """Partial profile patch. Only fields explicitly set are applied."""

    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    # Not nullable; an explicit null fails validation
    is_restaurant: bool = False
    restaurant_name: str | None = None
    restaurant_address: str | None = None
    phone_number: str | None = None


class User(UpsertUser, StoredRecord):
    """Stored user record."""

    created_at: datetime = Field(..., description="First time the user was seen")
    updated_at: datetime = Field(..., description="Last upsert or profile update")


class ContactMessageCreate(BaseModel):
    """Contact form submission."""

    restaurant_name: str = Field(..., min_length=1)
    contact_person: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ContactMessage(ContactMessageCreate, StoredRecord):
    """Stored contact inbox entry."""

    id: int = Field(..., description="Serial identifier assigned by the store")
    created_at: datetime = Field(..., description="Submission timestamp")
