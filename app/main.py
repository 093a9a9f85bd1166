# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.routers import admin, auth, courses, groups, rooms, schedules, timetable
from app.utils.errors import register_error_handlers

import time
import logging
from fastapi import Request
from app.logging_config import setup_logging


setup_logging()
logger = logging.getLogger("app.http")


# create tables if missing
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Academy Scheduling Backend", version="1.0.0")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
        ms = int((time.time() - start) * 1000)
        logger.info("%s %s -> %s (%dms)", request.method, request.url.path, response.status_code, ms)
        return response
    except Exception:
        ms = int((time.time() - start) * 1000)
        logger.exception("Unhandled error %s %s (%dms)", request.method, request.url.path, ms)
        raise


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(groups.router)
app.include_router(courses.router)
app.include_router(rooms.router)
app.include_router(schedules.router)
app.include_router(timetable.router)


@app.get("/")
def root():
    return {"message": "Academy backend is running!"}


@app.get("/health")
def health():
    return {"status": "ok"}
