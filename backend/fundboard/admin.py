"""
Admin-only operations: shared-secret check and the CSV ledger export.
"""
import csv
import io
import logging
from typing import Optional
from sqlalchemy.orm import Session
from . import models, schemas

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "id", "amount", "numbers", "method",
    "donor_name", "donor_phone", "donor_address", "created_at",
]


def is_authed(admin_key: Optional[str], admin_password: str) -> bool:
    # an unset password never authenticates
    return bool(admin_password) and (admin_key or "") == admin_password


def export_csv(db: Session) -> str:
    """All donation records, newest first, header row included."""
    rows = db.query(models.Donation).order_by(models.Donation.id.desc()).all()
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    for row in rows:
        record = schemas.Donation.model_validate(row).model_dump()
        record["created_at"] = record["created_at"].isoformat()
        writer.writerow(record)
    logger.info("Exported %d donations as CSV", len(rows))
    return out.getvalue()
