from fastapi import APIRouter, BackgroundTasks, Body, Depends
from sqlalchemy.orm import Session
from starlette.responses import Response
from . import admin, donations, forwarding, schemas, state
from .config import Settings
from .database import get_db
from .dependencies import get_app_settings, require_admin

router = APIRouter(prefix="/api", tags=["fundraiser"])


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/state", response_model=schemas.FundraiserStateOut)
def read_state(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)):
    """Progress toward the goal plus every claimed number."""
    return state.get_state(db, settings)


@router.post("/donations", status_code=201)
def create_donation(
    background_tasks: BackgroundTasks,
    payload=Body(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Claim numbers for a donation. 400 on invalid input, 409 with the
    overlapping numbers if any of them is already taken.
    """
    donation = donations.validate_donation(payload, max_number=settings.MAX_NUMBER)
    record = donations.record_donation(db, donation)
    if settings.FORWARD_TO_APPSCRIPT_URL:
        background_tasks.add_task(
            forwarding.forward_donation,
            settings.FORWARD_TO_APPSCRIPT_URL,
            forwarding.build_forward_payload(record),
            settings.FORWARD_TIMEOUT,
        )
    return {"ok": True}


@router.get("/export.csv", dependencies=[Depends(require_admin)])
def export_donations(db: Session = Depends(get_db)):
    return Response(
        content=admin.export_csv(db),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="donations.csv"'},
    )


@router.post("/admin/state", dependencies=[Depends(require_admin)])
def update_fundraiser_state(
    payload=Body(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Update bio and/or goal; fields left out are not changed."""
    payload = payload if isinstance(payload, dict) else {}
    fields = {key: payload[key] for key in ("bio", "goal") if key in payload}
    state.update_state(db, settings, **fields)
    return {"ok": True}


@router.post("/admin/reset", dependencies=[Depends(require_admin)])
def reset_fundraiser_state(db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)):
    """Restore default bio and goal. Donations are kept."""
    state.reset_state(db, settings)
    return {
        "ok": True,
        "note": 'Settings reset. To clear donations, run DELETE FROM donations from the '
                'database console; their number claims are removed with them.',
    }
