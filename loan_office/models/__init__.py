from loan_office.models.client import Client
from loan_office.models.guarantor import Guarantor
from loan_office.models.loan_record import LoanRecord
from loan_office.models.media_file import MediaFile
from loan_office.models.reference import Reference

__all__ = [
    "Client",
    "Guarantor",
    "LoanRecord",
    "MediaFile",
    "Reference",
]
