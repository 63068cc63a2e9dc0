import logging
import os

from fastapi import FastAPI
from dotenv import load_dotenv

from app.routes import router as import_router

# Load environment variables from .env
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Initialize FastAPI app
app = FastAPI(title="Company Import")

# Import and include routes
app.include_router(import_router)
