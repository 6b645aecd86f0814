import os
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database import Database
from app.routes.auth.auth_routes import router as auth_router
from app.routes.auth.user_routes import router as user_router
from app.routes.contest.contest_routes import router as contest_router
from app.routes.contest.submission_routes import router as submission_router
from app.routes.contest.leaderboard_routes import router as leaderboard_router
from app.routes.payment.payment_routes import router as payment_router
from app.routes.payment.webhook_routes import router as webhook_router
from app.utils.response import error_response

# Load environment variables
load_dotenv()

# Get environment variables
APP_NAME = os.getenv("APP_NAME", "Contest Corner")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for the application"""
    # Startup: one client for the whole process, handed to routes via get_database
    database = Database()
    await database.connect_db()
    app.state.database = database

    yield
    # Shutdown
    await database.close_db()


app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description="Contest Corner API: users, contests, submissions, payments and results",
    lifespan=lifespan
)

cors_origins = [
    FRONTEND_URL,
    "http://localhost:5173",
    "http://localhost:3000",
]

# Cookie auth needs credentials, so origins are listed explicitly
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(dict.fromkeys(cors_origins)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(contest_router)
app.include_router(submission_router)
app.include_router(leaderboard_router)
app.include_router(webhook_router)  # before /payments/{email}
app.include_router(payment_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Render HTTP errors (auth gate included) in the standard envelope"""
    response = error_response(message=str(exc.detail), status_code=exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Body, path and query validation failures in the standard envelope"""
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    return error_response(
        message=message,
        status_code=422,
        data={"errors": errors}
    )


@app.get("/")
async def read_root():
    """Root endpoint"""
    return {
        "message": f"Hello from {APP_NAME} server",
        "version": APP_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
