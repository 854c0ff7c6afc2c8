from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel
from typing import Optional
from models.user import User
from services.tally_service import TallyClient
from utils.auth_dependency import get_current_user
from utils.dependencies import get_tally_client

router = APIRouter(prefix="/api/tally", tags=["Tally"])

class TallyProxyRequest(BaseModel):
    xml: Optional[str] = None

@router.post("/proxy")
def proxy_to_tally(
    request: TallyProxyRequest,
    client: TallyClient = Depends(get_tally_client),
    current_user: User = Depends(get_current_user)
):
    """Forward a raw XML request to the Tally server and relay its reply"""
    if not request.xml or not request.xml.strip():
        raise HTTPException(status_code=400, detail="Missing XML")

    return Response(content=client.proxy(request.xml), media_type="application/xml")

@router.get("/test")
def test_tally_connection(
    client: TallyClient = Depends(get_tally_client),
    current_user: User = Depends(get_current_user)
):
    return client.test_connection()
