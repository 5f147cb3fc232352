import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.settings import AppConfig
from app.database import Base, engine
from app.routers import auth, user, project, task, health
from app.utils.errors import DomainError

# Configure logging
logging.basicConfig(level=AppConfig.LOGGING['level'], format=AppConfig.LOGGING['format'])
logger = logging.getLogger("taskmanager")

AppConfig.validate()

API_PREFIX = AppConfig.SERVER['api_prefix']

app = FastAPI(
    title=AppConfig.DOCS['title'],
    description=AppConfig.DOCS['description'],
    version=AppConfig.DOCS['version'],
    docs_url=f"{API_PREFIX}/{AppConfig.DOCS['path']}",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=AppConfig.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration = (time.perf_counter() - start) * 1000
        logger.exception(f"Request Error - {request.method} {request.url.path} Duration: {duration:.1f}ms")
        raise
    duration = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration:.1f}ms)")
    return response


# Domain errors raised by the services
@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.warning(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors()), "error": "validation_failed"},
    )


# Route registration
app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Authentication"])
app.include_router(user.router, prefix=f"{API_PREFIX}/users", tags=["Users"])
app.include_router(project.router, prefix=f"{API_PREFIX}/projects", tags=["Projects"])
app.include_router(task.router, prefix=API_PREFIX, tags=["Tasks"])
app.include_router(health.router, prefix=f"{API_PREFIX}/health", tags=["Health"])


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting Task Manager API ({AppConfig.SERVER['env']})")
    if AppConfig.SERVER['auto_create_tables']:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Task Manager API...")


# Root route
@app.get(API_PREFIX or "/")
def read_root():
    return {"message": "Task Manager API"}
