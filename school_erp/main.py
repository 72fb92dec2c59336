from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core.database import close_db_connections
from .core.cache import cache_manager
from .core.error_handlers import register_exception_handlers
from .core.logging import setup_logging
from .clients.auth_admin import auth_admin_client
from .clients.storage import storage_client

# Import all routers
from .routers import (
    health, auth, me, admin, dashboard, schools, classes, students, teachers,
    parents, teacher_assignments, exams, grades, attendance, assignments, lesson_plans,
)

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting School ERP API ({settings.environment})")

    await cache_manager.initialize()
    logger.info("Cache initialized" if cache_manager.enabled else "Cache disabled")

    yield

    logger.info("Shutting down School ERP API")
    await cache_manager.close()
    await auth_admin_client.close()
    await storage_client.close()
    await close_db_connections()
    logger.info("Shutdown complete")

app = FastAPI(
    title="School ERP API",
    description="Multi-tenant school management: classes, accounts, exams, attendance, assignments and lesson plans",
    version=settings.app_version,
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

register_exception_handlers(app)

# Include all routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(me.router)
app.include_router(admin.router)
app.include_router(dashboard.router)
app.include_router(schools.router)
app.include_router(classes.router)
app.include_router(students.router)
app.include_router(teachers.router)
app.include_router(parents.router)
app.include_router(teacher_assignments.router)
app.include_router(exams.router)
app.include_router(grades.router)
app.include_router(attendance.router)
app.include_router(assignments.router)
app.include_router(lesson_plans.router)

@app.get("/")
async def root():
    return {
        "message": "School ERP API",
        "version": settings.app_version,
        "status": "active"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
