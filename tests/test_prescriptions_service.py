from datetime import date

import pytest

from mediplus.application.ports.prescriptions_repo import MedicineDto
from mediplus.application.services.prescriptions_service import PrescriptionsService, normalize_medicines
from mediplus.exceptions import NotFound, ValidationError, WrongDay

TODAY = date(2026, 10, 19)  # Monday


class FakePrescriptions:
    def __init__(self, ledger):
        self.ledger = ledger
        self.calls = []

    def create_and_complete(self, appointment_id, additional_notes, medicines):
        self.calls.append((appointment_id, additional_notes, medicines))
        self.ledger.set_status(appointment_id, "Completed")
        return len(self.calls)


def paracetamol(**overrides):
    fields = dict(medicine_name="Paracetamol", times_per_day=3, duration_days=5)
    fields.update(overrides)
    return MedicineDto(**fields)


@pytest.fixture
def prescriptions(ledger):
    return FakePrescriptions(ledger)


@pytest.fixture
def svc(ledger, prescriptions, clock):
    return PrescriptionsService(appointments=ledger, prescriptions=prescriptions, clock=clock)


def test_complete_today_marks_completed(svc, ledger, prescriptions):
    appt = ledger.create(10, 1, "Monday", 1, TODAY)
    out = svc.complete_with_prescription(1, appt.id, [paracetamol()], "rest well")
    assert out.prescription_id == 1
    assert out.status == "Completed"
    assert ledger.rows[0].status == "Completed"
    _, notes, meds = prescriptions.calls[0]
    assert notes == "rest well"
    assert meds[0].dosage_pattern == "1+1+1"


def test_wrong_day_is_rejected_regardless_of_status(svc, ledger, prescriptions):
    booked = ledger.create(10, 1, "Tuesday", 1, date(2026, 10, 20))
    completed = ledger.create(11, 1, "Wednesday", 1, date(2026, 10, 21))
    ledger.set_status(completed.id, "Completed")

    with pytest.raises(WrongDay):
        svc.complete_with_prescription(1, booked.id, [paracetamol()])
    with pytest.raises(WrongDay):
        svc.complete_with_prescription(1, completed.id, [paracetamol()])
    assert prescriptions.calls == []


def test_other_doctors_appointment_is_not_found(svc, ledger):
    appt = ledger.create(10, 2, "Monday", 1, TODAY)
    with pytest.raises(NotFound):
        svc.complete_with_prescription(1, appt.id, [paracetamol()])


def test_already_completed_today_is_not_found(svc, ledger):
    appt = ledger.create(10, 1, "Monday", 1, TODAY)
    svc.complete_with_prescription(1, appt.id, [paracetamol()])
    with pytest.raises(NotFound):
        svc.complete_with_prescription(1, appt.id, [paracetamol()])


def test_invalid_medicines_rejected_before_ledger_access(svc, ledger, prescriptions):
    appt = ledger.create(10, 1, "Monday", 1, TODAY)
    with pytest.raises(ValidationError):
        svc.complete_with_prescription(1, appt.id, [])
    with pytest.raises(ValidationError):
        svc.complete_with_prescription(1, appt.id, [paracetamol(duration_days=None)])
    with pytest.raises(ValidationError):
        svc.complete_with_prescription(1, appt.id, [paracetamol(medicine_name="  ")])
    # Validation wins even for unknown appointments
    with pytest.raises(ValidationError):
        svc.complete_with_prescription(1, 999, [paracetamol(times_per_day=0)])
    assert prescriptions.calls == []
    assert ledger.rows[0].status == "Booked"


def test_dosage_pattern_defaults():
    meds = normalize_medicines([
        paracetamol(times_per_day=1),
        paracetamol(times_per_day=2),
        paracetamol(times_per_day=3),
        paracetamol(times_per_day=4),
        paracetamol(times_per_day=2, dosage_pattern="0+1+1"),
    ])
    assert [m.dosage_pattern for m in meds] == ["1+0+0", "1+0+1", "1+1+1", "1+0+0", "0+1+1"]
