"""Shared fixtures: moto-backed DynamoDB tables and isolated settings."""

import os

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from knowbase.config import AppSettings, set_app_settings
from knowbase.db.constants import ENTITY_KEYS
from knowbase.db.dynamodb_client import get_dynamodb_resource
from knowbase.integrations.mail.config import MailSettings, set_mail_settings
from knowbase.integrations.mail.mailer import Mailer, get_mailer
from knowbase.main import app

TEST_ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"x-kb-admin-key": TEST_ADMIN_KEY}


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_REGION"] = "us-east-1"


@pytest.fixture
def app_settings():
    """Settings with a known admin key and test table prefix."""
    settings = AppSettings(kb_admin_api_key=TEST_ADMIN_KEY, table_prefix="test-")
    set_app_settings(settings)
    yield settings
    set_app_settings(None)


@pytest.fixture
def mail_disabled():
    """Mail settings that only log."""
    settings = MailSettings(enabled=False)
    set_mail_settings(settings)
    yield settings
    set_mail_settings(None)


@pytest.fixture
def dynamodb_tables(aws_credentials, app_settings):
    """Create one mock table per entity, keyed like production."""
    with mock_aws():
        get_dynamodb_resource.cache_clear()
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        tables = {}
        for entity, key in ENTITY_KEYS.items():
            tables[entity] = dynamodb.create_table(
                TableName=app_settings.table_name(entity.value),
                KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": key, "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )

        yield tables

        get_dynamodb_resource.cache_clear()


@pytest.fixture
def client(dynamodb_tables, mail_disabled):
    """Test client against mock tables with mail disabled."""
    app.dependency_overrides[get_mailer] = lambda: Mailer(mail_disabled)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
