"""
Best-effort copy of each donation to an external webhook (e.g. a Google Apps
Script feeding a spreadsheet). Runs after the response has been sent; a failure
here is logged and never affects the donation.
"""
import datetime
import logging
import time
from typing import Optional
import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)


def build_forward_payload(donation, now: Optional[datetime.datetime] = None) -> dict:
    now = now or datetime.datetime.now()
    return {
        "amount": donation.amount,
        "numbers": donation.numbers,
        "method": donation.method,
        "donorName": donation.donor_name,
        "donorPhone": donation.donor_phone,
        "donorAddress": donation.donor_address,
        "date": f"{now.month}/{now.day}/{now.year}",
        "timestamp": int(time.time() * 1000),
    }


def forward_donation(url: str, payload: dict, timeout: float = 10.0) -> bool:
    """POST ``payload`` to ``url``. Returns False instead of raising on failure."""
    try:
        resp = requests.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
    except RequestException as e:
        status = getattr(getattr(e, "response", None), "status_code", None)
        logger.warning("Donation forward failed: %s", status or e)
        return False
    logger.info("Forwarded donation (numbers=%s)", payload.get("numbers"))
    return True
