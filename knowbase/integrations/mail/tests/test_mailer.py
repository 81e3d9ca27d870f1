"""Tests for the SES mailer against moto."""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from knowbase.integrations.mail.config import MailSettings
from knowbase.integrations.mail.exceptions import MailError
from knowbase.integrations.mail.mailer import Mailer

SENDER = "kb@example.com"


@pytest.fixture
def ses(aws_credentials):
    with mock_aws():
        client = boto3.client("ses", region_name="us-east-1")
        client.verify_email_identity(EmailAddress=SENDER)
        yield client


def sent_count(client) -> int:
    return int(client.get_send_quota()["SentLast24Hours"])


@pytest.mark.asyncio
async def test_account_created_mail_is_sent(ses):
    mailer = Mailer(MailSettings(sender=SENDER), client=ses)

    sent = await mailer.send_account_created("new@example.com", "New Person", "Temp1234abcd")

    assert sent is True
    assert sent_count(ses) == 1


@pytest.mark.asyncio
async def test_disabled_mailer_only_logs(ses):
    mailer = Mailer(MailSettings(sender=SENDER, enabled=False), client=ses)

    assert await mailer.send("subject", "body", to=["a@example.com"]) == 0
    assert sent_count(ses) == 0


@pytest.mark.asyncio
async def test_empty_recipients_is_noop(ses):
    mailer = Mailer(MailSettings(sender=SENDER), client=ses)

    assert await mailer.send_news_notification("title", "body", []) == 0
    assert sent_count(ses) == 0


@pytest.mark.asyncio
async def test_bcc_is_batched_under_recipient_limit():
    ses_client = MagicMock()
    mailer = Mailer(
        MailSettings(sender=SENDER, notify_to="list@example.com", max_recipients=3),
        client=ses_client,
    )
    recipients = [f"user{i}@example.com" for i in range(5)]

    sent = await mailer.send_news_notification("Safety", "body", recipients)

    assert sent == 3
    batches = [c.kwargs["Destination"] for c in ses_client.send_email.call_args_list]
    assert all(d["ToAddresses"] == ["list@example.com"] for d in batches)
    assert [len(d["BccAddresses"]) for d in batches] == [2, 2, 1]
    subject = ses_client.send_email.call_args.kwargs["Message"]["Subject"]
    assert subject == {"Data": "【KnowBaseお知らせ】Safety", "Charset": "UTF-8"}


@pytest.mark.asyncio
async def test_ses_rejection_raises_mail_error():
    ses_client = MagicMock()
    ses_client.send_email.side_effect = ClientError(
        {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
        "SendEmail",
    )
    mailer = Mailer(MailSettings(sender=SENDER), client=ses_client)

    with pytest.raises(MailError) as exc_info:
        await mailer.send("s", "b", to=["a@example.com"])

    assert "not verified" in exc_info.value.message
