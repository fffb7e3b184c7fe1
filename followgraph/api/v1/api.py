# followgraph/api/v1/api.py
from fastapi import APIRouter
import logging

from .endpoints import follows

logger = logging.getLogger(__name__)

api_router = APIRouter()

api_router.include_router(follows.router, prefix="/follows", tags=["follows"])
logger.info("Follows router registered")
