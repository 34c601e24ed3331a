from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
import logging

from drawing_chat import __version__, config

# Configure logging: keep exactly one StreamHandler on the root logger,
# uvicorn may already have installed its own.
_root = logging.getLogger()
_root.setLevel(config.LOG_LEVEL)
_stream_handlers = [h for h in _root.handlers if isinstance(h, logging.StreamHandler)]
if len(_stream_handlers) > 1:
    for h in _stream_handlers[1:]:
        _root.removeHandler(h)
elif not _stream_handlers:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Drawing Chat API",
    description="Architectural drawing analysis and grounded follow-up Q&A",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from drawing_chat.analysis.routes import get_assistant, router as analysis_router  # noqa: E402

app.include_router(analysis_router)


@app.on_event("startup")
async def startup():
    """Log configuration and report which models the backend offers."""
    config.validate_config()
    gateway = get_assistant().gateway
    models = await run_in_threadpool(gateway.list_models)
    if gateway.is_usable(models):
        logger.info("✅ %s available: %s", gateway.provider_label, ", ".join(m.name for m in models))
    else:
        logger.warning("⚠️ %s not available - analysis and chat will use fallbacks", gateway.provider_label)
        if config.AI_PROVIDER == "ollama":
            logger.warning("   ollama pull llama3.2")
            logger.warning("   ollama pull llava  # for image analysis")
    logger.info("🌐 Ready to analyze documents at /api/upload")


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "online",
        "service": "Drawing Chat API",
        "version": __version__,
        "aiProvider": config.AI_PROVIDER,
    }
