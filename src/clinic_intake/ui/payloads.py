"""Wizard submission JSON (camelCase) and its translation into domain values."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from clinic_intake.domain.model import DraftPhoto, DraftProcedure, DraftProvider, SubmissionFlow
from clinic_intake.domain.submissions import ClinicSubmission, SubmittedClinic


class WizardModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ClinicPayload(WizardModel):
    clinic_name: str | None = Field(default=None, alias="clinicName")
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(default=None, alias="zipCode")
    website: str | None = None
    phone: str | None = None
    email: str | None = None
    category: str | None = None


class AdvancedPayload(WizardModel):
    latitude: float | None = None
    longitude: float | None = None
    place_id: str | None = Field(default=None, alias="placeID")
    google_rating: float | None = Field(default=None, alias="googleRating")
    google_review_count: int | None = Field(default=None, alias="googleReviewCount")


class PhotoPayload(WizardModel):
    photo_url: str = Field(alias="photoURL")
    photo_type: str = Field(default="clinic", alias="photoType")
    is_primary: bool = Field(default=False, alias="isPrimary")
    display_order: int = Field(default=0, alias="displayOrder")
    caption: str | None = None


class ProviderPayload(WizardModel):
    provider_name: str = Field(default="", alias="providerName")
    specialty: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")


class ProcedurePayload(WizardModel):
    procedure_name: str = Field(default="", alias="procedureName")
    category: str | None = None
    average_cost: float | None = Field(default=None, alias="averageCost")
    price_min: float | None = Field(default=None, alias="priceMin")
    price_max: float | None = Field(default=None, alias="priceMax")
    unit: str | None = None
    provider_names: list[str] = Field(default_factory=list[str], alias="providerNames")


class SubmissionPayload(WizardModel):
    flow: SubmissionFlow
    submitter_key: str | None = Field(default=None, alias="submitterKey")
    existing_clinic_id: int | None = Field(default=None, alias="existingClinicId")
    clinic: ClinicPayload | None = None
    advanced: AdvancedPayload = Field(default_factory=AdvancedPayload)
    photos: list[PhotoPayload] = Field(default_factory=list[PhotoPayload])
    providers: list[ProviderPayload] = Field(default_factory=list[ProviderPayload])
    procedures: list[ProcedurePayload] = Field(default_factory=list[ProcedurePayload])

    def to_submission(self) -> ClinicSubmission:
        clinic: SubmittedClinic | None = None
        if self.clinic is not None or self.flow is SubmissionFlow.NEW_CLINIC:
            details = self.clinic or ClinicPayload()
            clinic = SubmittedClinic(
                name=details.clinic_name,
                address=details.address,
                city=details.city,
                state=details.state,
                zip_code=details.zip_code,
                website=details.website,
                phone=details.phone,
                email=details.email,
                category=details.category,
                latitude=self.advanced.latitude,
                longitude=self.advanced.longitude,
                place_ref=self.advanced.place_id,
                google_rating=self.advanced.google_rating,
                google_review_count=self.advanced.google_review_count,
            )
        return ClinicSubmission(
            flow=self.flow,
            clinic=clinic,
            existing_clinic_id=self.existing_clinic_id,
            submitted_by=self.submitter_key,
            providers=[
                DraftProvider(
                    name=provider.provider_name,
                    specialty=provider.specialty,
                    photo_url=provider.photo_url,
                )
                for provider in self.providers
            ],
            procedures=[
                DraftProcedure(
                    name=procedure.procedure_name,
                    category=procedure.category,
                    average_cost=procedure.average_cost,
                    price_min=procedure.price_min,
                    price_max=procedure.price_max,
                    price_unit=procedure.unit,
                    # only the first named provider is kept on the draft
                    provider_name=procedure.provider_names[0] if procedure.provider_names else None,
                )
                for procedure in self.procedures
            ],
            photos=[
                DraftPhoto(
                    url=photo.photo_url,
                    photo_type=photo.photo_type,
                    is_primary=photo.is_primary,
                    display_order=photo.display_order,
                    caption=photo.caption,
                )
                for photo in self.photos
            ],
        )
