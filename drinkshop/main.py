# drinkshop/main.py
import uvicorn

from drinkshop.api import create_app
from drinkshop.utils.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

app = create_app()
logger.info("Drink shop cart service ready")

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
