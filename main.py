import logging
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, Depends, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from smartkollect.config import settings
from smartkollect.logging_config import setup_logging

# Import our Logic Modules
from smartkollect.allocation_core.agent import AllocationAgent
from smartkollect.errors import AllocationError
from smartkollect.ingestion import parse_account_numbers_text, read_account_numbers_file

# Import Database Modules
from smartkollect.database import create_tables, get_db
from smartkollect.repository import AllocationRepository
from add_sample_data import add_sample_data

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.API_TITLE, version=settings.API_VERSION)

# --- CORS MIDDLEWARE (admin UI runs on its own origin) ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- STARTUP ---
@app.on_event("startup")
def startup_event():
    if not settings.database_configured:
        logger.error("--- STARTUP: DATABASE_URL is not set, allocation endpoints will fail ---")
        return

    logger.info("--- STARTUP: Ensuring Database Tables ---")
    try:
        create_tables()
        if settings.SEED_SAMPLE_DATA:
            add_sample_data()
    except Exception as e:
        logger.exception(f"Startup Error: {e}")
    logger.info("--- STARTUP: Complete ---")


# --- ERROR HANDLING ---
# The admin UI shows the `error` string in a toast, so every failure is
# rendered as {"error": ...} with a status code.
@app.exception_handler(AllocationError)
def allocation_error_handler(request: Request, exc: AllocationError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
    return JSONResponse(status_code=400, content={"error": f"Invalid request body: {detail}"})


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"[API] Unexpected error on {request.url.path}")
    return JSONResponse(status_code=500, content={"error": f"An unexpected error occurred: {exc}"})


# --- DEPENDENCIES ---
def get_repository(db: Session = Depends(get_db)) -> AllocationRepository:
    return AllocationRepository(db)


def get_allocation_agent(repository: AllocationRepository = Depends(get_repository)) -> AllocationAgent:
    return AllocationAgent(repository)


# --- DATA MODELS ---
class BulkAllocationRequest(BaseModel):
    # Loosely typed so bad input gets the UI's messages rather than a 422
    accountNumbers: Optional[Any] = None
    agentId: Optional[str] = None


class AllocationRequest(BaseModel):
    accountId: Optional[str] = None
    agentId: Optional[str] = None


class InteractionRequest(BaseModel):
    accountId: Optional[str] = None
    agentId: Optional[str] = None
    interactionType: Optional[str] = None
    details: Optional[str] = None


# --- ENDPOINTS ---

@app.get("/")
def health_check():
    return {"status": "active", "system": settings.API_TITLE}


@app.post("/api/allocations/bulk")
def bulk_allocate(request: BulkAllocationRequest, agent: AllocationAgent = Depends(get_allocation_agent)):
    """
    Allocate many accounts, given by account number, to one agent.
    Existing allocations of the matched accounts are replaced.
    """
    report = agent.bulk_allocate(request.accountNumbers, request.agentId)
    return report.to_response()


@app.post("/api/allocations/bulk/upload")
async def bulk_allocate_upload(
    file: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    agentId: Optional[str] = Form(None),
    agent: AllocationAgent = Depends(get_allocation_agent),
):
    """
    Same as /api/allocations/bulk, with account numbers read from a CSV/Excel
    sheet and/or pasted as text (one per line, or comma separated).
    """
    account_numbers = []
    if file is not None:
        content = await file.read()
        account_numbers.extend(read_account_numbers_file(content, file.filename or ""))
    account_numbers.extend(parse_account_numbers_text(text))
    report = agent.bulk_allocate(account_numbers, agentId)
    return report.to_response()


@app.post("/api/allocations")
def allocate_account(request: AllocationRequest, agent: AllocationAgent = Depends(get_allocation_agent)):
    allocation = agent.allocate_account(request.accountId, request.agentId)
    return {"success": True, "allocation": allocation.to_dict()}


@app.get("/api/allocations")
def get_agent_allocations(
    agentId: Optional[str] = None,
    sortByInteraction: bool = True,
    agent: AllocationAgent = Depends(get_allocation_agent),
):
    """
    Active allocations of an agent with the account details attached.
    """
    return {"allocations": agent.allocated_accounts(agentId, sortByInteraction)}


@app.get("/api/allocations/metrics")
def get_agent_allocation_metrics(agentId: Optional[str] = None, agent: AllocationAgent = Depends(get_allocation_agent)):
    return agent.allocation_metrics(agentId)


@app.get("/api/allocations/top-overdue")
def get_agent_top_overdue_accounts(
    agentId: Optional[str] = None,
    limit: int = 5,
    agent: AllocationAgent = Depends(get_allocation_agent),
):
    """
    The agent's overdue accounts, largest balance first.
    """
    return {"accounts": agent.top_overdue_accounts(agentId, limit)}


@app.post("/api/interactions")
def record_interaction(request: InteractionRequest, agent: AllocationAgent = Depends(get_allocation_agent)):
    interaction = agent.record_interaction(
        request.accountId, request.agentId, request.interactionType, request.details
    )
    return {"success": True, "interaction": interaction.to_dict()}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
