# accounts/main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Your configuration and DB
from accounts.config import settings, ensure_required_settings
from accounts.core.db import init_db, close_db
from accounts.core.errors import IdentityError

from accounts.api.v1.routers import users

from accounts.core.bootstrap import ensure_default_admin
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IdentityError)
async def identity_error_handler(request: Request, exc: IdentityError):
    """Map identity-core failures to their status code and {code, message} detail."""
    if exc.status_code >= 500:
        logger.error("[error] %s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies / query params are business 400s, not 422s."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({"field": field, "message": error["msg"], "type": error["type"]})
    message = errors[0]["message"] if errors else "Invalid input"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"code": "VALIDATION_ERROR", "message": message, "errors": errors}},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Last-resort boundary: log and answer 500 with the error message (or a generic one)."""
    logger.exception("[error] Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": {"code": "INTERNAL_ERROR", "message": str(exc) or "Internal server error"}},
    )


@app.on_event("startup")
async def on_startup():
    # JWT_SECRET and DATABASE_URL are mandatory; exits the process otherwise
    ensure_required_settings()
    await init_db(generate_schemas=settings.db_generate_schemas)
    logger.info("[db] connected")
    # Ensure there's a default admin account on first run
    await ensure_default_admin()


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(users.router, prefix="/api/v1")


@app.get("/healthz")
def healthz():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("accounts.main:app", host=settings.host, port=settings.port)
