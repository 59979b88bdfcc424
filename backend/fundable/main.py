import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fundable.config import PROJECT_ROOT, settings
from fundable.db.init_db import init_db
from fundable.domains.companies.api.company_endpoints import router as company_router
from fundable.domains.companies.api.fundable_amount_endpoints import router as fundable_amount_router
from fundable.domains.companies.clients.edgar_client import get_edgar_client
from fundable.shared.exceptions import DomainException, handle_domain_exception

load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database schema ready")
    yield
    await get_edgar_client().close()


app = FastAPI(
    title="Fundable Amount API",
    description="Imports SEC EDGAR net income history and calculates fundable amounts for companies",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    http_exception = handle_domain_exception(exc)
    return JSONResponse(status_code=http_exception.status_code, content={"detail": http_exception.detail})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    http_exception = handle_domain_exception(exc)
    return JSONResponse(status_code=http_exception.status_code, content={"detail": http_exception.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "error": "Invalid request",
                "error_code": "INVALID_ARGUMENT",
                "details": {"errors": jsonable_encoder(exc.errors())}
            }
        }
    )


api_router = APIRouter()
api_router.include_router(company_router, prefix="/companies", tags=["Companies"])
api_router.include_router(fundable_amount_router, prefix="/fundable-amounts", tags=["Fundable Amounts"])

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": "Fundable Amount API is running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# To run this application from the backend directory:
# uvicorn fundable.main:app --reload
