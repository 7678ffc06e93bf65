from fastapi import APIRouter, Depends
from typing import Optional
from pydantic import BaseModel

from deps import get_gateway
from services.analysis_gateway import AnalysisGateway

router = APIRouter(prefix="/api", tags=["Analysis"])


class AnalyzeRequest(BaseModel):
	promptText: str

class AnalyzeOut(BaseModel):
	success: bool
	result: Optional[str] = None
	error: Optional[str] = None


# Sync handler: the blocking upstream call runs in the thread pool
@router.post("/analyze-code", response_model=AnalyzeOut, response_model_exclude_none=True)
def analyze_code(payload: AnalyzeRequest, gateway: AnalysisGateway = Depends(get_gateway)):
	return gateway.analyze(payload.promptText)
