# FastAPI Server for the OmaHub Studio: designer application review

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import sys

from config.app_config import LOG_LEVEL
from database.config import init_db
from routers.applications import router as applications_router

# Configure Logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="OmaHub Studio API",
    description="Designer application review and brand onboarding",
    version="1.0.0"
)

@app.on_event("startup")
def startup_event():
    # Initialize database tables using SQLAlchemy create_all
    # Alembic migrations remain the source of truth in production
    try:
        init_db()
    except SQLAlchemyError as e:
        logger.warning(f"Database table init skipped: {e}")

# CORS Setup - Allow all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Required when using "*"
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ERROR RESPONSES
# ============================================================================
# Errors are returned as {"error": ..., "details"?: ...}

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if any(err.get("loc", ())[-1:] == ("status",) for err in errors):
        message = "Invalid status. Must be one of: new, reviewing, approved, rejected"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "details": jsonable_encoder(errors)},
    )


# ============================================================================
# ROUTERS
# ============================================================================
app.include_router(applications_router)


# Health Check
@app.get("/")
def root():
    return {
        "message": "OmaHub Studio API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
