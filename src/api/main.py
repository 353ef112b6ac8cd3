import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes.capture import router as capture_router
from src.api.routes.classify import router as classify_router
from src.api.routes.processing import router as processing_router
from src.api.routes.stats import router as stats_router
from src.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="Braindump Organizer API",
    description="Rule-based task/note organization and productivity analytics for captured thoughts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(classify_router)
app.include_router(capture_router)
app.include_router(processing_router)
app.include_router(stats_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
