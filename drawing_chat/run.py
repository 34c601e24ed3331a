import logging
import uvicorn

from drawing_chat import config

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger("DrawingChatRunner")


def main():
    logger.info("🚀 Starting Uvicorn Server on %s:%s...", config.HOST, config.PORT)
    uvicorn.run(
        "drawing_chat.api:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.RELOAD,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
