"""Customers bounded context: customer profiles and their communication preferences."""

import structlog
from protean.domain import Domain

customers = Domain(name="customers")

logger = structlog.get_logger(__name__)
