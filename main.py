"""
Tax Estimator - FastAPI Backend
Features:
- Progressive federal income tax for all five filing statuses (2025 tables)
- Per-bracket breakdown with marginal and effective rates
- Bracket table lookup per filing status
"""
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from api.tax import router as tax_router

# Constants
APP_TITLE = "Tax Estimator API"
APP_VERSION = "2025.1"
SERVICE_NAME = "tax-estimator-api"
HOST = os.environ.get("TAX_API_HOST", "0.0.0.0")
PORT = int(os.environ.get("TAX_API_PORT", "5001"))
CORS_ORIGINS = [o.strip() for o in os.environ.get("TAX_API_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.environ.get("TAX_LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=APP_TITLE,
    description="Progressive income tax calculation by filing status",
    version=APP_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tax_router, prefix="/api")


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", response_class=HTMLResponse)
async def index():
    """Home page"""
    return HTMLResponse(content="<h1>Tax Estimator API</h1><p>Use /docs for API documentation</p>")


@app.get("/health")
async def health_check():
    """Health check endpoint for deployment"""
    return {"status": "healthy", "service": SERVICE_NAME}


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting %s on %s:%d", APP_TITLE, HOST, PORT)
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
