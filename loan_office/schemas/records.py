from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from loan_office.schemas.common import FileType, LoanStatus
from loan_office.schemas.dashboard import CamelModel


class OrmModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class GuarantorRead(OrmModel):
    id: UUID | str
    name: str
    id_number: str
    phone_number: str


class ReferenceRead(OrmModel):
    id: UUID | str
    name: str
    phone_number: str
    relationship_to_client: str = Field(alias="relationship")


class MediaFileRead(OrmModel):
    id: UUID | str
    file_name: str
    file_type: FileType
    file_url: str
    description: str | None = None


class ClientSummary(OrmModel):
    id: UUID | str
    name: str
    id_number: str
    phone_number_1: str = Field(alias="phoneNumber1")
    phone_number_2: str | None = Field(default=None, alias="phoneNumber2")
    business_location: str
    permit_number: str | None = None
    home_address: str


class LoanRecordRead(OrmModel):
    id: UUID | str
    client_id: UUID | str
    loan_amount: float
    interest_rate: float
    registration_fee: float = 0
    loan_duration: int
    application_date: datetime
    disbursement_date: datetime | None = None
    first_installment_date: datetime | None = None
    last_installment_date: datetime | None = None
    daily_payment_check: bool = False
    loan_officer: str
    status: LoanStatus


class LoanRecordWithClient(LoanRecordRead):
    client: ClientSummary | None = None


class LoanRecordDetail(LoanRecordRead):
    guarantors: list[GuarantorRead] = Field(default_factory=list)
    references: list[ReferenceRead] = Field(default_factory=list)
    media_files: list[MediaFileRead] = Field(default_factory=list)


class ClientDetail(ClientSummary):
    loan_records: list[LoanRecordDetail] = Field(default_factory=list)
