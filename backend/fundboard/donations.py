"""
Donation recording: request validation, claimed-number conflict check and the
ledger write.

Each claimed number gets its own row in ``number_claims`` whose primary key is
the number itself, so two donations can never commit the same number even if
both pass the pre-check concurrently. The pre-check only exists to report the
overlapping numbers back to the caller.
"""
import logging
from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from . import models
from .errors import ConflictError, ValidationError
from .schemas import DonationCreate, PAYMENT_METHODS

logger = logging.getLogger(__name__)

DONOR_FIELDS = ("donorName", "donorPhone", "donorAddress")


def _as_int(value):
    """Return ``value`` as an int if it is integral (3 or 3.0), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_donation(payload, max_number: int = 80) -> DonationCreate:
    """
    Check a raw request body. Rules run in order and the first failure wins:
    numbers, amount, method, donor fields. The amount is deliberately not
    compared with the sum of the numbers.
    """
    if not isinstance(payload, dict):
        raise ValidationError("numbers[] required")

    raw_numbers = payload.get("numbers")
    if not isinstance(raw_numbers, list) or len(raw_numbers) == 0:
        raise ValidationError("numbers[] required")
    numbers = [_as_int(n) for n in raw_numbers]
    if any(n is None for n in numbers):
        raise ValidationError("numbers must be integers")
    if any(n < 1 or n > max_number for n in numbers):
        raise ValidationError(f"numbers must be between 1 and {max_number}")
    if len(set(numbers)) != len(numbers):
        raise ValidationError("numbers must not repeat")

    amount = _as_int(payload.get("amount"))
    if amount is None or amount <= 0 or amount > models.MAX_INTEGER:
        raise ValidationError("invalid amount")

    method = payload.get("method")
    if method not in PAYMENT_METHODS:
        raise ValidationError("invalid method")

    donor = {}
    for field in DONOR_FIELDS:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("donor info required")
        donor[field] = value.strip()

    return DonationCreate(amount=amount, numbers=numbers, method=method, **donor)


def find_conflicts(db: Session, numbers: List[int]) -> List[int]:
    """Numbers from ``numbers`` that are already claimed, in the order given."""
    taken = {
        n for (n,) in db.query(models.NumberClaim.number)
        .filter(models.NumberClaim.number.in_(numbers))
        .all()
    }
    return [n for n in numbers if n in taken]


def record_donation(db: Session, donation: DonationCreate) -> models.Donation:
    conflicts = find_conflicts(db, donation.numbers)
    if conflicts:
        logger.info("Rejected donation, numbers already taken: %s", conflicts)
        raise ConflictError(conflicts)

    record = models.Donation(
        amount=donation.amount,
        numbers=",".join(str(n) for n in donation.numbers),
        method=donation.method,
        donor_name=donation.donor_name,
        donor_phone=donation.donor_phone,
        donor_address=donation.donor_address,
    )
    db.add(record)
    try:
        db.flush()
        for n in donation.numbers:
            db.add(models.NumberClaim(number=n, donation_id=record.id))
        db.commit()
    except IntegrityError:
        # another request claimed one of these numbers between check and commit
        db.rollback()
        conflicts = find_conflicts(db, donation.numbers)
        logger.info("Donation lost claim race, numbers already taken: %s", conflicts)
        raise ConflictError(conflicts or list(donation.numbers))

    db.refresh(record)
    logger.info("Recorded donation id=%s amount=%s numbers=%s method=%s",
                record.id, record.amount, record.numbers, record.method,
                extra={"donation_id": record.id})
    return record
