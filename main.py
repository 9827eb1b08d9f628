import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from auth import auth_router
from budgets import budget_router
from config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from database import Base, engine
from errors import AppError
from router import router

logging.basicConfig(
    level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Personal Budget Tracker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def validation_message(exc):
    """First validation error, phrased for a person rather than a parser."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    error = errors[0]
    message = error.get("msg", "Invalid input")
    if error.get("type") == "value_error":
        return message.removeprefix("Value error, ")
    if error.get("type") == "missing":
        return "All fields are required"
    if error.get("type") == "json_invalid":
        return "Invalid JSON body"
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{field}: {message}" if field else message


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": validation_message(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


app.include_router(auth_router, prefix="/auth", tags=["authentication"])
app.include_router(router, tags=["expenses"])
app.include_router(budget_router, tags=["budgets"])


@app.get("/")
def home():
    return {"message": "Welcome to Personal Budget Tracker API"}


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
