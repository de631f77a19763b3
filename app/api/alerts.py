from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_operator
from app.core.config import get_settings
from app.db.session import get_db
from app.schemas.alerts import (
    AlertBroadcastRequest,
    AlertBroadcastResponse,
    AlertDetailResponse,
    AlertFields,
    AlertMutationResponse,
    NotificationListResponse,
    NotificationOut,
    UserAlertListResponse,
    UserAlertOut,
)
from app.services.alerts import AlertContent, AlertFanOutEngine, AlertStore, AlertValidationError, Recipient
from app.services.push import PushService

router = APIRouter(prefix="/api", tags=["alerts"])

push_service = PushService()


def _content(payload: AlertFields) -> AlertContent:
    return AlertContent(
        title=payload.title.strip(),
        status=payload.status.strip(),
        alert_level=payload.alert_level.strip(),
        status_color=payload.status_color,
        details=payload.details,
    )


@router.post("/alert", response_model=AlertBroadcastResponse, dependencies=[Depends(get_current_operator)])
def send_alert(payload: AlertBroadcastRequest, db: Session = Depends(get_db)):
    recipients = [Recipient(user_code=user.user_id, teams_affected=user.teams_affected) for user in payload.users]
    try:
        result = AlertFanOutEngine(db, push_service).broadcast(_content(payload), recipients)
    except AlertValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return AlertBroadcastResponse(
        success=True,
        alert_id=result.alert_id,
        successful=result.successful,
        failed=result.failed,
        total=result.total,
    )


@router.get("/user/{code}/alerts", response_model=UserAlertListResponse)
def user_alerts(code: str, db: Session = Depends(get_db)):
    rows = AlertStore(db).list_for_user(code, limit=get_settings().user_alerts_limit)
    return UserAlertListResponse(success=True, alerts=[UserAlertOut.model_validate(row) for row in rows])


@router.get("/notifications", response_model=NotificationListResponse, dependencies=[Depends(get_current_operator)])
def notification_history(
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = AlertStore(db).list_history(limit=limit or get_settings().history_default_limit)
    return NotificationListResponse(
        success=True,
        notifications=[NotificationOut.model_validate(row) for row in rows],
    )


@router.put("/alerts/{alert_id}", response_model=AlertMutationResponse, dependencies=[Depends(get_current_operator)])
def update_alert(alert_id: str, payload: AlertFields, db: Session = Depends(get_db)):
    try:
        touched = AlertStore(db).update(alert_id, _content(payload))
    except AlertValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return AlertMutationResponse(success=True, message="Alert updated successfully", **touched)


@router.delete("/alerts/{alert_id}", response_model=AlertMutationResponse, dependencies=[Depends(get_current_operator)])
def delete_alert(alert_id: str, db: Session = Depends(get_db)):
    touched = AlertStore(db).soft_delete(alert_id)
    return AlertMutationResponse(success=True, message="Alert deleted successfully", **touched)


@router.get("/alerts/{alert_id}", response_model=AlertDetailResponse, dependencies=[Depends(get_current_operator)])
def alert_detail(alert_id: str, db: Session = Depends(get_db)):
    recipients, history = AlertStore(db).rows_for_alert(alert_id)
    if history is None and not recipients:
        raise HTTPException(status_code=404, detail="Alert not found")

    return AlertDetailResponse(
        success=True,
        notification=NotificationOut.model_validate(history) if history else None,
        recipients=[UserAlertOut.model_validate(row) for row in recipients],
    )
