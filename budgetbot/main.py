"""
FastAPI application factory
"""
import logging
import traceback

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import JSONResponse

from budgetbot.api.deps import get_db
from budgetbot.api.v1 import auth, budgets, summary, transactions
from budgetbot.config import get_settings
from budgetbot.infrastructure.db.session import check_db_connection

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Log any unhandled exception with traceback and answer 500"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


def create_app() -> FastAPI:
    """
    Application factory

    Returns:
        configured FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="BudgetBot",
        debug=settings.DEBUG,
    )

    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(auth.router)
    app.include_router(transactions.router)
    app.include_router(budgets.router)
    app.include_router(summary.router)

    @app.get("/", response_class=PlainTextResponse, tags=["system"])
    def root():
        return "BudgetBot backend is running..."

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready(db: Session = Depends(get_db)):
        """Readiness check endpoint (database reachable)"""
        check_db_connection(db)
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "budgetbot.main:app",
        host="127.0.0.1",
        port=5001,
        reload=True,
    )
