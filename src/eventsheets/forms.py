"""
Request bodies for the API.  The registration form carries the same rules
the public form page enforces, checked in a fixed order so the first
failure is the message the applicant sees.
"""
from typing import Optional
from urllib.parse import unquote
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9]{10,15}$")
DIGITS_RE = re.compile(r"^[0-9]+$")
# characters Google Sheets will not accept in a sheet title
SHEET_TITLE_FORBIDDEN_RE = re.compile(r"[\[\]\*\?/\\:]")

GENDERS = ("male", "female")
STATUSES = ("student", "graduate")
LEVELS = ("1", "2", "3", "4", "5")

REQUIRED_FIELDS = ("companyName", "eventName", "name", "phone", "email", "gender",
                   "college", "status", "nationalId", "age", "university", "faculty")


def _form_error(message: str, kind: str = "form") -> PydanticCustomError:
    return PydanticCustomError(kind, message)


def first_error_message(exc) -> str:
    """The message of the first error of a pydantic ValidationError."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    return str(errors[0].get("msg", "Invalid request"))


class RegistrationForm(BaseModel):
    model_config = ConfigDict(extra="ignore")

    companyName: str = ""
    eventName: str = ""
    name: str = ""
    phone: str = ""
    email: str = ""
    gender: str = ""
    college: str = ""
    status: str = ""
    nationalId: str = ""
    age: str = ""
    university: str = ""
    level: str = ""
    faculty: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def as_text(cls, v):
        # JSON numbers (age, phone) and nulls arrive as such from some clients
        if v is None:
            return ""
        if isinstance(v, bool):
            raise _form_error("Invalid field value")
        if isinstance(v, (int, float)):
            v = str(int(v)) if float(v).is_integer() else str(v)
        if not isinstance(v, str):
            raise _form_error("Invalid field value")
        return v.strip()

    @field_validator("companyName", "eventName")
    @classmethod
    def url_decoded(cls, v: str) -> str:
        return unquote(v).strip()

    @field_validator("gender", "status")
    @classmethod
    def lower_choice(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def check_rules(self):
        if any(not getattr(self, f) for f in REQUIRED_FIELDS):
            raise _form_error("All fields are required")
        if not EMAIL_RE.match(self.email):
            raise _form_error("Invalid email format")
        if not PHONE_RE.match(self.phone):
            raise _form_error("Invalid phone number format")
        if not DIGITS_RE.match(self.age):
            raise _form_error("Age must be a number")
        if not 1 <= int(self.age) <= 100:
            raise _form_error("Please enter a valid age between 1 and 100")
        if len(self.name) < 3:
            raise _form_error("Name must be at least 3 characters")
        if len(self.nationalId) < 8:
            raise _form_error("Please enter a valid National ID")
        if len(self.faculty) < 2:
            raise _form_error("Please enter a valid faculty")
        if self.gender not in GENDERS:
            raise _form_error("Please select a valid gender")
        if self.status not in STATUSES:
            raise _form_error("Please select a valid status")
        if self.status == "student":
            if self.level not in LEVELS:
                raise _form_error("Please select a valid level")
        else:
            # graduates have no level
            self.level = ""
        return self


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = ""
    description: str = Field(default="", max_length=2000)

    @field_validator("name")
    @classmethod
    def valid_sheet_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise _form_error("Company name is required")
        if SHEET_TITLE_FORBIDDEN_RE.search(v):
            raise _form_error("Company name cannot contain any of [ ] * ? / \\ :")
        return v

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        v = v.strip()
        if v and not EMAIL_RE.match(v):
            raise _form_error("Invalid email format")
        return v


class EventCreate(BaseModel):
    company: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    displayName: Optional[str] = None
    description: str = ""
    date: str = ""
    image: str = ""
    enabled: bool = True

    @field_validator("company", "name")
    @classmethod
    def stripped(cls, v: str) -> str:
        v = unquote(v).strip()
        if not v:
            raise _form_error("Company and event names must not be blank")
        return v


class StatusUpdate(BaseModel):
    enabled: bool
