import logging
import uvicorn
from jobmatch.config import config
from jobmatch.delivery.web.app import create_app

logging.basicConfig(
    level=config.get_log_level(),
    format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
)
logger = logging.getLogger("jobmatch")

if __name__ == "__main__":
    web_config = config.get_web_config()
    app = create_app()
    logger.info(f"JobMatch API starting on {web_config['host']}:{web_config['port']}")
    logger.info("API documentation available at /docs")
    uvicorn.run(app, host=web_config['host'], port=web_config['port'])
