"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from surgiflow.core.config import settings
from surgiflow.core.structured_logging import configure_logging
from surgiflow.db.session import engine
from surgiflow.services.errors import SurgicalWorkflowError

configure_logging()
logger = logging.getLogger(__name__)

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # Clinical data must never leave the clinic
    )
    logger.info("Sentry initialized for error tracking")


app = FastAPI(
    title="Surgiflow API",
    description="Surgical case workflow engine: case states, WHO checklist gates, "
    "operative timeline and theater day board",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)


async def surgical_workflow_error_handler(request: Request, exc: SurgicalWorkflowError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.add_exception_handler(SurgicalWorkflowError, surgical_workflow_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Actor-Id", "X-Actor-Role"],
)


from surgiflow.routers import checklists, dayboard, surgical_cases, timeline

app.include_router(surgical_cases.router, prefix="/surgical-cases", tags=["surgical-cases"])
app.include_router(checklists.router, prefix="/surgical-cases", tags=["checklist"])
app.include_router(timeline.router, prefix="/surgical-cases", tags=["timeline"])
app.include_router(dayboard.router, prefix="/theater", tags=["theater"])


@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
