import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import api_router
from core.config import get_settings
from core.error_handler import (
    ExceptionNormalizationMiddleware,
    domain_exception_handler,
    global_exception_handler,
    setup_logging,
)
from core.exceptions import DomainError
from core.middleware import CorrelationIdMiddleware


setup_logging()
settings = get_settings()

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Recipes, their ingredients and who may change them",
    version="0.1.0",
)

# Last added wraps outermost: CORS, correlation id, then the catch-all normalizer
app.add_middleware(ExceptionNormalizationMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DomainError, domain_exception_handler)
app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)

app.include_router(api_router)

logging.getLogger(__name__).info(
    "%s started (environment=%s)", settings.APP_NAME, settings.ENVIRONMENT
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
