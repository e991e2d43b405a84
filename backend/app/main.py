# main.py
"""
Point d'entrée de l'API Moodwell.
Enregistre tous les modules via leurs routers.

Architecture : modules verticaux quasi-autonomes + engine transversal.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.logging import setup_logging

from app.modules.checkin.router   import router as checkin_router
from app.modules.advice.router    import router as advice_router
from app.modules.feedback.router  import router as feedback_router
from app.modules.analytics.router import router as analytics_router

setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkin_router)
app.include_router(advice_router)
app.include_router(feedback_router)
app.include_router(analytics_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}
