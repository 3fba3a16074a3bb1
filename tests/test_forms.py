import pytest
from pydantic import ValidationError

from eventsheets.forms import RegistrationForm, CompanyCreate, EventCreate, StatusUpdate, first_error_message


def form_error(data: dict) -> str:
    with pytest.raises(ValidationError) as e:
        RegistrationForm(**data)
    return first_error_message(e.value)

def test_valid_form(form_data):
    form = RegistrationForm(**form_data(companyName="Acme%20Corp", gender="Female",
                                        email="  sara@example.com ", extra="ignored"))
    assert(form.companyName == "Acme Corp")
    assert(form.gender == "female")
    assert(form.email == "sara@example.com")
    assert(form.level == "4")

def test_numbers_accepted(form_data):
    form = RegistrationForm(**form_data(age=22, phone=1012345678))
    assert(form.age == "22")
    assert(form.phone == "1012345678")

def test_graduate_has_no_level(form_data):
    form = RegistrationForm(**form_data(status="graduate", level="3"))
    assert(form.level == "")
    form = RegistrationForm(**form_data(status="Graduate", level=None))
    assert(form.status == "graduate")
    assert(form.level == "")

@pytest.mark.parametrize("changes,message", [
    ({"email": ""}, "All fields are required"),
    ({"faculty": None}, "All fields are required"),
    ({"companyName": "   "}, "All fields are required"),
    ({"email": "sara@example"}, "Invalid email format"),
    ({"email": "sara example@x.com"}, "Invalid email format"),
    ({"phone": "12345"}, "Invalid phone number format"),
    ({"phone": "+201012345678"}, "Invalid phone number format"),
    ({"phone": "٠١٠٠٠٠٠٠٠٠١"}, "Invalid phone number format"),
    ({"age": "twenty"}, "Age must be a number"),
    ({"age": "٢٢"}, "Age must be a number"),
    ({"age": "0"}, "Please enter a valid age between 1 and 100"),
    ({"age": "101"}, "Please enter a valid age between 1 and 100"),
    ({"name": "Al"}, "Name must be at least 3 characters"),
    ({"nationalId": "1234567"}, "Please enter a valid National ID"),
    ({"faculty": "X"}, "Please enter a valid faculty"),
    ({"gender": "other"}, "Please select a valid gender"),
    ({"status": "alumni"}, "Please select a valid status"),
    ({"level": "6"}, "Please select a valid level"),
    ({"level": ""}, "Please select a valid level"),
])
def test_form_errors(form_data, changes, message):
    assert(form_error(form_data(**changes)) == message)

def test_first_failure_wins(form_data):
    assert(form_error(form_data(email="bad", phone="bad", age="bad")) == "Invalid email format")
    assert(form_error(form_data(phone="bad", age="bad")) == "Invalid phone number format")

def test_bad_types(form_data):
    assert(form_error(form_data(age=True)) == "Invalid field value")
    assert(form_error(form_data(name=["Sara"])) == "Invalid field value")

def test_company_create():
    c = CompanyCreate(name=" Initech ", email="hr@initech.test")
    assert(c.name == "Initech")
    assert(c.description == "")

    with pytest.raises(ValidationError) as e:
        CompanyCreate(name="Initech/Sales")
    assert("cannot contain" in first_error_message(e.value))
    with pytest.raises(ValidationError) as e:
        CompanyCreate(name="   ")
    assert(first_error_message(e.value) == "Company name is required")
    with pytest.raises(ValidationError) as e:
        CompanyCreate(name="Initech", email="nope")
    assert(first_error_message(e.value) == "Invalid email format")

def test_event_create():
    e = EventCreate(company="Acme%20Corp", name=" Hack Night ")
    assert(e.company == "Acme Corp")
    assert(e.name == "Hack Night")
    assert(e.enabled)
    assert(e.displayName is None)
    with pytest.raises(ValidationError):
        EventCreate(company="Acme Corp", name="  ")

    assert(StatusUpdate(enabled=False).enabled is False)
    with pytest.raises(ValidationError):
        StatusUpdate()
