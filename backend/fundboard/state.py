"""
Fundraiser progress: aggregates over the donation ledger plus the singleton
goal/bio settings row.
"""
import logging
import math
import re
from sqlalchemy import func
from sqlalchemy.orm import Session
from . import models

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')
_UNSET = object()


def ensure_state(db: Session, settings) -> models.FundraiserState:
    """Insert the settings row with defaults if it does not exist yet."""
    row = db.get(models.FundraiserState, models.STATE_ROW_ID)
    if row is None:
        row = models.FundraiserState(
            id=models.STATE_ROW_ID,
            goal=settings.DEFAULT_GOAL,
            bio=settings.DEFAULT_BIO,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Created fundraiser state with goal=%s", row.goal)
    return row


def get_state(db: Session, settings) -> dict:
    raised, count = db.query(
        func.coalesce(func.sum(models.Donation.amount), 0),
        func.count(models.Donation.id),
    ).one()
    taken = [n for (n,) in db.query(models.NumberClaim.number).order_by(models.NumberClaim.number).all()]
    row = db.get(models.FundraiserState, models.STATE_ROW_ID)
    return {
        "raised": int(raised),
        "donationCount": int(count),
        "goal": row.goal if row is not None else settings.DEFAULT_GOAL,
        "bio": row.bio if row is not None else "",
        "takenNumbers": taken,
    }


def parse_goal(value, default: int) -> int:
    """
    Lenient integer parse: the leading integer of ``value`` ("4000abc" -> 4000).
    Anything unparsable, not positive, or too large for the column falls back to ``default``.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if isinstance(value, (int, float)):
        parsed = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return default
        parsed = int(match.group(1))
    return parsed if 0 < parsed <= models.MAX_INTEGER else default


def update_state(db: Session, settings, bio=_UNSET, goal=_UNSET) -> models.FundraiserState:
    """
    Update whichever of bio/goal is passed; the other is left untouched.
    A null bio is ignored. A null goal parses like any unparsable value and
    resets the goal to the default.
    """
    row = ensure_state(db, settings)
    if bio is not _UNSET and bio is not None:
        row.bio = str(bio)
    if goal is not _UNSET:
        row.goal = parse_goal(goal, settings.DEFAULT_GOAL)
    db.commit()
    db.refresh(row)
    logger.info("Fundraiser state updated (bio=%s, goal=%s)", bio is not _UNSET, goal is not _UNSET)
    return row


def reset_state(db: Session, settings) -> models.FundraiserState:
    """Restore default bio and goal. The donation ledger is not touched."""
    return update_state(db, settings, bio=settings.DEFAULT_BIO, goal=settings.DEFAULT_GOAL)
