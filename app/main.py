from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import model  # noqa: F401  registers every table on Base.metadata
from app.config import settings
from app.exceptions import AppError
from app.log import get_logger
from app.router import (
    auth_router,
    schools_router,
    tickets_router,
    students_router,
    student_router,
    catalog_router,
)

log = get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.API_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",  # For local development
        "http://localhost:5173",  # For Vite development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


######################
### Error handling ###
######################
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(schools_router, prefix="/api/schools", tags=["Schools"])
app.include_router(tickets_router, prefix="/api/schools/{school_id}/tickets", tags=["Tickets"])
app.include_router(students_router, prefix="/api/schools/{school_id}", tags=["Students"])
app.include_router(student_router, prefix="/api/student", tags=["Student"])
app.include_router(catalog_router, prefix="/api/catalog", tags=["Catalog"])


#####################
### Root Endpoint ###
#####################
@app.get("/")
def read_root():
    return {"App: ": settings.PROJECT_NAME, "Environment: ": settings.ENV, "Version: ": settings.API_VERSION}
