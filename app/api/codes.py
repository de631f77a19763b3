from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_current_operator
from app.db.session import get_db
from app.schemas.codes import AddCodesRequest, AddCodesResponse, ValidCodeListResponse, ValidCodeOut
from app.services.codes import CodeRegistry

router = APIRouter(prefix="/api", tags=["codes"], dependencies=[Depends(get_current_operator)])


@router.post("/add-valid-codes", response_model=AddCodesResponse)
def add_valid_codes(payload: AddCodesRequest, db: Session = Depends(get_db)):
    if not payload.codes:
        raise HTTPException(status_code=400, detail="codes array is required")

    summary = CodeRegistry(db).add_codes(payload.codes)
    return AddCodesResponse(success=True, message=f"Processed {len(payload.codes)} codes", **summary)


@router.get("/valid-codes", response_model=ValidCodeListResponse)
def list_valid_codes(db: Session = Depends(get_db)):
    rows = CodeRegistry(db).list_codes()
    return ValidCodeListResponse(
        success=True,
        codes=[ValidCodeOut.model_validate(row) for row in rows],
        total=len(rows),
    )
