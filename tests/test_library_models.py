import datetime

import pytest

from library_models import (Book, Gender, Instructor, LoanRecord, StateError, Student,
                            ValidationError)
from conftest import ANA_ID, MARIA_ID


# ---------------- Person ----------------
def test_new_person_has_no_active_loan(ana, maria):
    assert not ana.has_active_loan()
    assert ana.loan_isbn is None
    assert not maria.has_active_loan()


def test_entitlement_by_kind(ana, maria):
    assert ana.max_loan_days() == 10
    assert maria.max_loan_days() == 20


def test_loan_state_set_and_clear(ana):
    ana.set_active_loan("B1")
    assert ana.has_active_loan()
    assert ana.loan_isbn == "B1"
    ana.clear_active_loan()
    assert not ana.has_active_loan()


@pytest.mark.parametrize("kwargs", [
    {"full_name": "  "},
    {"identifier": "12.345.678-4"},
    {"identifier": "12345678"},
    {"gender": "X"},
    {"gender": "m"},
    {"program": ""},
])
def test_student_constructor_rejects_bad_values(kwargs):
    values = {"full_name": "Ana", "identifier": ANA_ID, "gender": "F", "program": "CS"}
    values.update(kwargs)
    with pytest.raises(ValidationError):
        Student(**values)


def test_person_fields_are_trimmed_and_gender_is_enum():
    s = Student("  Ana Rojas ", ANA_ID, "F", " Law ")
    assert s.full_name == "Ana Rojas"
    assert s.program == "Law"
    assert s.gender is Gender.FEMALE


def test_setter_failure_keeps_previous_value(ana):
    with pytest.raises(ValidationError):
        ana.identifier = "11.111.111-2"
    assert ana.identifier == ANA_ID
    with pytest.raises(ValidationError):
        ana.full_name = ""
    assert ana.full_name == "Ana Rojas"


def test_instructor_requires_profession():
    with pytest.raises(ValidationError):
        Instructor("Maria", MARIA_ID, "F", " ")


def test_instructor_degrees_keep_order_and_skip_duplicates(maria):
    maria.add_degree(" Doctor ")
    maria.add_degree("Master")
    maria.add_degree("")
    maria.add_degree(None)
    assert maria.degrees == ["Master", "Doctor"]


def test_instructor_degrees_returns_copy(maria):
    maria.degrees.append("Bachelor")
    assert maria.degrees == ["Master"]


def test_instructor_degrees_setter_cleans_values(maria):
    maria.degrees = ["Doctor", " ", "Doctor", "Master "]
    assert maria.degrees == ["Doctor", "Master"]


# ---------------- Book ----------------
@pytest.mark.parametrize("args", [
    ("", "T", "A", 1, 1),
    ("B", " ", "A", 1, 1),
    ("B", "T", "", 1, 1),
    ("B", "T", "A", 0, 0),
    ("B", "T", "A", 2, 0),
    ("B", "T", "A", 1, 2),
    ("B", "T", "A", None, 1),
])
def test_book_constructor_rejects_bad_values(args):
    with pytest.raises(ValidationError):
        Book(*args)


def test_book_trims_text_and_image():
    b = Book(" B1 ", " Title ", " Author ", 2, 1, " cover.png ")
    assert (b.isbn, b.title, b.author, b.image) == ("B1", "Title", "Author", "cover.png")
    assert Book("B2", "T", "A", 1, 1).image == ""


def test_book_check_out_and_in_stay_in_bounds():
    b = Book("B1", "T", "A", 2, 2)
    with pytest.raises(StateError):
        b.check_in()
    assert b.available_copies == 2

    b.check_out()
    b.check_out()
    assert b.available_copies == 0
    assert not b.has_available()
    with pytest.raises(StateError):
        b.check_out()
    assert b.available_copies == 0

    b.check_in()
    assert b.available_copies == 1
    assert b.has_available()


def test_book_setters_revalidate():
    b = Book("B1", "T", "A", 3, 2)
    b.available_copies = 0
    assert b.available_copies == 0
    with pytest.raises(ValidationError):
        b.available_copies = 4
    with pytest.raises(ValidationError):
        b.available_copies = -1
    b.available_copies = 3
    with pytest.raises(ValidationError):
        b.total_copies = 2
    with pytest.raises(ValidationError):
        b.total_copies = 0
    b.total_copies = 5
    assert (b.total_copies, b.available_copies) == (5, 3)
    with pytest.raises(ValidationError):
        b.title = ""
    assert b.title == "T"


# ---------------- LoanRecord ----------------
LOAN_DATE = datetime.date(2026, 1, 1)


def test_loan_record_due_date():
    r = LoanRecord("B1", ANA_ID, 7, loan_date=LOAN_DATE)
    assert r.loan_date == LOAN_DATE
    assert r.due_date == datetime.date(2026, 1, 8)


def test_loan_record_defaults_to_today():
    r = LoanRecord("B1", ANA_ID, 3)
    assert r.loan_date == datetime.date.today()


@pytest.mark.parametrize("args", [("", ANA_ID, 5), ("B1", " ", 5), ("B1", ANA_ID, 0), ("B1", ANA_ID, -2)])
def test_loan_record_rejects_bad_values(args):
    with pytest.raises(ValidationError):
        LoanRecord(*args)


@pytest.mark.parametrize("return_date, fee", [
    (datetime.date(2026, 1, 8), 0),
    (datetime.date(2026, 1, 11), 3000),
    (datetime.date(2026, 1, 5), 0),
    (datetime.datetime(2026, 1, 9, 18, 30), 1000),
])
def test_compute_fee(return_date, fee):
    r = LoanRecord("B1", ANA_ID, 7, loan_date=LOAN_DATE)
    assert r.compute_fee(return_date) == fee
    # repeated evaluation does not change the record
    assert r.compute_fee(return_date) == fee
    assert r.due_date == datetime.date(2026, 1, 8)


def test_compute_fee_custom_rate():
    r = LoanRecord("B1", ANA_ID, 7, loan_date=LOAN_DATE)
    assert r.compute_fee(datetime.date(2026, 1, 10), fee_per_day=500) == 1000


def test_receipt_lists_loan_details():
    r = LoanRecord("B1", ANA_ID, 7, loan_date=LOAN_DATE)
    receipt = r.format_receipt()
    for text in ("B1", ANA_ID, "01/01/2026", "Days: 7", "08/01/2026"):
        assert text in receipt
    widths = {len(line) for line in receipt.splitlines()}
    assert len(widths) == 1
