from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from typing import Dict
from api.tecdoc import router as tecdoc_router
from api.vehicle_lookup import router as vehicle_lookup_router
from api.chat import router as chat_router
from config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Gateway to the TecDoc parts catalog, the Norwegian vehicle registry and the parts assistant",
    version="0.1.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tecdoc_router, prefix=settings.API_V1_STR, tags=["tecdoc"])
app.include_router(vehicle_lookup_router, prefix=settings.API_V1_STR, tags=["vehicle-lookup"])
app.include_router(chat_router, prefix=settings.API_V1_STR, tags=["chat"])

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": "Failed to process request"})

@app.get("/")
async def root() -> Dict[str, str]:
    """Root endpoint for health check"""
    return {"status": "healthy", "message": f"{settings.PROJECT_NAME} is running"}

@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
