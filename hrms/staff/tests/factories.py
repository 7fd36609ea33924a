from factory import Faker
from factory import LazyAttribute
from factory import Sequence
from factory import SubFactory
from factory.django import DjangoModelFactory

from hrms.companies.tests.factories import CompanyFactory
from hrms.staff.models import StaffRecord
from hrms.staff.models import StaffUpload


class StaffRecordFactory(DjangoModelFactory):
    company = SubFactory(CompanyFactory)
    staff_id = Sequence(lambda n: f"STF{n:04d}")
    first_name = Faker("first_name")
    last_name = Faker("last_name")
    email = LazyAttribute(
        lambda o: f"{o.first_name}.{o.last_name}.{o.staff_id}@example.com".lower()
    )
    department = "Finance"
    position = "Analyst"
    is_active = True

    class Meta:
        model = StaffRecord


STAFF_HEADERS = [
    "staffId",
    "email",
    "firstName",
    "lastName",
    "department",
    "position",
    "phone",
    "bankName",
    "accountNumber",
]


def staff_cells(**overrides) -> dict:
    """One valid staff upload row, keyed by ``STAFF_HEADERS``."""
    cells = {
        "staffId": "ACM100",
        "email": "bola.ade@acme.example.com",
        "firstName": "Bola",
        "lastName": "Ade",
        "department": "Customer Service",
        "position": "CSR",
        "phone": "+2348012345678",
        "bankName": "GTBank",
        "accountNumber": "0123456789",
    }
    cells.update(overrides)
    return cells


class StaffUploadFactory(DjangoModelFactory):
    company = SubFactory(CompanyFactory)
    file_name = "staff.csv"

    class Meta:
        model = StaffUpload
