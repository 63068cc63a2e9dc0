import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import certifi
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .config import Settings

logger = logging.getLogger(__name__)


class CompanyStore:
    """Upserts normalized company records into the ingest collection."""

    def __init__(self, collection: Optional[Collection] = None):
        self.collection = collection

    @property
    def enabled(self) -> bool:
        return self.collection is not None

    def upsert_company(self, doc: Dict) -> bool:
        if self.collection is None:
            return False
        try:
            self.collection.update_one(
                {"company_name": doc["company_name"], "normalized_domain": doc["normalized_domain"]},
                {"$set": doc},
                upsert=True,
            )
            return True
        except PyMongoError as e:
            logger.warning(f"Store upsert failed for '{doc.get('company_name')}': {e}")
            return False


@contextmanager
def open_company_store(settings: Settings) -> Iterator[CompanyStore]:
    """
    Opens the document store for one request and closes it afterwards.
    Without MONGODB_URL (or when the client can't be built) persistence is skipped.
    """
    if not settings.mongo_url:
        logger.info("MONGODB_URL not set; persistence disabled")
        yield CompanyStore()
        return

    try:
        client = MongoClient(settings.mongo_url, tlsCAFile=certifi.where())
    except PyMongoError as e:
        logger.warning(f"Store init skipped: {e}")
        yield CompanyStore()
        return

    try:
        db = client[settings.mongo_db_name]
        yield CompanyStore(db[settings.mongo_collection_name])
    finally:
        client.close()
