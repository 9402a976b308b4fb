"""
VideoAPI - Alertmanager Webhook
Turns Alertmanager notifications into alerts: firing alerts are created,
resolved ones get their resolved_at stamp.
"""
import logging
import secrets
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.config import get_settings
from app.crud.errors import CrudError
from app.schemas.alert import Alert
from app.services.stores import alert_store
from app.store.sqlresource import Resource

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/hook", tags=["hooks"])

# labels and annotations promoted to alert columns instead of the message
PROMOTED = ("alertname", "camera", "severity")


# ============================================================
# Schemas
# ============================================================

class AlertmanagerAlert(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    labels: Dict[str, str] = {}
    annotations: Dict[str, str] = {}
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")


class AlertmanagerNotification(BaseModel):
    """Body of an Alertmanager webhook call."""
    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    alerts: List[AlertmanagerAlert] = []
    group_labels: Dict[str, str] = Field(default={}, alias="groupLabels")
    common_labels: Dict[str, str] = Field(default={}, alias="commonLabels")
    common_annotations: Dict[str, str] = Field(default={}, alias="commonAnnotations")


# ============================================================
# Conversion
# ============================================================

def _is_set(value: Optional[datetime]) -> bool:
    # Alertmanager sends 0001-01-01T00:00:00Z for unset times
    return value is not None and value.year > 1


def to_alert(notification: AlertmanagerNotification, item: AlertmanagerAlert) -> Alert:
    """Build the alert record for one notification entry."""
    fields: Dict[str, str] = {}
    for source in (
        notification.common_labels,
        notification.group_labels,
        notification.common_annotations,
        item.labels,
        item.annotations,
    ):
        fields.update(source)

    alertname = fields.pop("alertname", "")
    camera = fields.pop("camera", "")
    severity = fields.pop("severity", "")
    message = ", ".join(f"{key}: {value}" for key, value in fields.items())

    return Alert(
        id=f"{camera}_{alertname}_{item.starts_at.isoformat()}",
        timestamp=item.starts_at,
        camera=camera,
        severity=severity,
        message=message,
    )


async def apply(alerts: Resource[Alert], notification: AlertmanagerNotification) -> int:
    """Store every alert of the notification; returns how many failed."""
    failed = 0
    for item in notification.alerts:
        if not _is_set(item.starts_at):
            continue
        alert = to_alert(notification, item)
        try:
            if item.status == "firing":
                await alerts.post(alert)
            elif item.status == "resolved":
                resolved_at = item.ends_at if _is_set(item.ends_at) else alert.timestamp
                await alerts.put(alert.id, Alert(resolved_at=resolved_at))
        except CrudError as e:
            failed += 1
            logger.error(f"Failed to store alert '{alert.id}' ({item.status}): {e}")
    return failed


# ============================================================
# Endpoint
# ============================================================

def _authorized(request: Request, api_key: str) -> bool:
    if not api_key:
        return False
    candidates = [request.query_params.get("apiKey", "")]
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        candidates.append(header[len("Bearer "):])
    return any(secrets.compare_digest(c.encode(), api_key.encode()) for c in candidates)


@router.post("/alertmanager", response_class=PlainTextResponse)
async def alertmanager_hook(request: Request):
    """Alertmanager webhook receiver, authorized with the configured API key."""
    if not _authorized(request, get_settings().alertmanager_api_key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    try:
        notification = AlertmanagerNotification.model_validate_json(await request.body())
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    failed = await apply(alert_store, notification)
    if failed:
        logger.warning(f"{failed} of {len(notification.alerts)} alerts could not be stored")
    return "OK"
