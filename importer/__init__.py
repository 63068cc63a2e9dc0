# importer/__init__.py

"""
Company import pipeline

This package is responsible for:
1. Asking the completion API for companies matching a search, page by page.
2. Recovering the JSON company list from free-text model output.
3. Normalizing each company onto the canonical record and geocoding its locations.
4. Dropping repeats by company name + domain.
5. Storing each new company in the document store and validating the final list.
"""

from .engine import ImportResult, import_status, run_import
from .schemas import validate_companies
