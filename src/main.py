"""Main application entry point for the halal storefront service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from halal_storefront.auth.api_key_validator import load_api_keys
from halal_storefront.handlers.api_handler import create_app
from halal_storefront.observability import configure_logging, setup_observability
from halal_storefront.repositories.dynamodb_storage import DynamoDBStorage
from halal_storefront.repositories.memory_storage import MemStorage
from halal_storefront.repositories.seed_data import seed_catalog_if_empty
from halal_storefront.repositories.storage import Storage
from halal_storefront.services.checkout_service import CheckoutService, load_tax_rate

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def create_storage() -> Storage:
    """Create the storage backend selected by STORAGE_BACKEND.

    The catalog is seeded when SEED_CATALOG is true and no categories exist.

    Returns:
        Configured Storage implementation

    Raises:
        ValueError: If STORAGE_BACKEND names an unknown backend
    """
    backend = os.getenv("STORAGE_BACKEND", "memory").lower()

    storage: Storage
    if backend == "memory":
        storage = MemStorage()
    elif backend == "dynamodb":
        prefix = os.getenv("DYNAMODB_TABLE_PREFIX", "halal-storefront")
        storage = DynamoDBStorage(dynamodb_resource=get_dynamodb_resource(), table_prefix=prefix)
    else:
        raise ValueError(f"Unsupported STORAGE_BACKEND '{backend}', expected 'memory' or 'dynamodb'")

    logger.info(f"Storage backend configured: {backend}")

    if os.getenv("SEED_CATALOG", "true").lower() == "true":
        seed_catalog_if_empty(storage)

    return storage


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates and seeds the storage backend
    3. Creates the checkout service
    4. Creates the FastAPI app
    5. Sets up observability when OTEL_ENABLED is true

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing halal storefront service...")

    storage = create_storage()
    checkout_service = CheckoutService(storage=storage, tax_rate=load_tax_rate())

    app = create_app(
        storage=storage,
        checkout_service=checkout_service,
        api_keys=load_api_keys(),
    )

    if os.getenv("OTEL_ENABLED", "false").lower() == "true":
        setup_observability(app)

    logger.info("Halal storefront service initialized successfully")

    return app


# Only build the real application outside of test mode so that importing this
# module during test collection has no side effects
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
