# backend/main.py
import logging
import time

from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db

# Routers
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.orders import router as orders_router
from routes.dishes import router as dishes_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("restaurant")

# Tables and order states
init_db()

app = FastAPI(title="Restaurant API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Console logger of every handled request
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# Unknown paths and methods answer a bare 404
@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return Response(status_code=404)
    return await http_exception_handler(request, exc)


# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(orders_router)
app.include_router(dishes_router)

@app.get("/")
def read_root():
    return {"message": "Restaurant API is running"}
