# app/main.py
from app.api import create_app
from app.data.database import init_db
from app.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)

logger.info("Initializing database...")
try:
    init_db()
    logger.info("Database tables created successfully")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
