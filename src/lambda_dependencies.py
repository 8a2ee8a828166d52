"""Shared dependency factory for the Lambda handler.

Dependencies are created once and reused across invocations within the same
Lambda container to keep warm starts cheap.
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

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_storage: Storage | None = None
_checkout_service: CheckoutService | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def get_storage() -> Storage:
    """Create or retrieve cached storage backend.

    Lambda deployments default to DynamoDB since in-memory state does not
    survive container recycling.

    Returns:
        Configured Storage implementation
    """
    global _storage

    if _storage is not None:
        return _storage

    backend = os.getenv("STORAGE_BACKEND", "dynamodb").lower()

    if backend == "memory":
        logger.warning("Using in-memory storage in Lambda - data is per container")
        _storage = MemStorage()
    elif backend == "dynamodb":
        prefix = os.getenv("DYNAMODB_TABLE_PREFIX", "halal-storefront")
        _storage = DynamoDBStorage(dynamodb_resource=get_dynamodb_resource(), table_prefix=prefix)
    else:
        raise ValueError(f"Unsupported STORAGE_BACKEND '{backend}', expected 'memory' or 'dynamodb'")

    if os.getenv("SEED_CATALOG", "true").lower() == "true":
        seed_catalog_if_empty(_storage)

    logger.info(f"Storage initialized: {backend}")
    return _storage


def get_checkout_service() -> CheckoutService:
    """Create or retrieve cached checkout service.

    Returns:
        Configured CheckoutService instance
    """
    global _checkout_service

    if _checkout_service is not None:
        return _checkout_service

    _checkout_service = CheckoutService(storage=get_storage(), tax_rate=load_tax_rate())

    logger.info("Checkout service initialized")
    return _checkout_service


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(
        storage=get_storage(),
        checkout_service=get_checkout_service(),
        api_keys=load_api_keys(),
    )

    if os.getenv("OTEL_ENABLED", "false").lower() == "true":
        setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
