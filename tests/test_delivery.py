"""
Tests for SMS delivery adapters.
"""

from urllib.parse import parse_qs

import httpx
import pytest

from verify_core.delivery import LogSender, MessageStatus, TwilioSender


def _twilio(handler, **kwargs):
    options = {"from_number": "+15005550006"}
    options.update(kwargs)
    return TwilioSender(
        account_sid="AC123",
        auth_token="token",
        transport=httpx.MockTransport(handler),
        **options,
    )


class TestTwilioSender:
    """Tests for the Twilio sender over a mocked transport."""

    @pytest.mark.asyncio
    async def test_send_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM123", "status": "queued"})

        sender = _twilio(handler)
        await sender.initialize()
        try:
            result = await sender.send_sms("+14155551234", "Your verification code is 123456.")
        finally:
            await sender.close()

        assert result.success is True
        assert result.provider_message_id == "SM123"
        assert result.status == MessageStatus.PENDING
        assert seen["url"].endswith("/Accounts/AC123/Messages.json")
        assert seen["auth"].startswith("Basic ")
        assert seen["form"]["To"] == ["+14155551234"]
        assert seen["form"]["From"] == ["+15005550006"]

    @pytest.mark.asyncio
    async def test_prefers_messaging_service(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM123", "status": "accepted"})

        sender = _twilio(handler, messaging_service_sid="MG123")
        await sender.initialize()
        try:
            await sender.send_sms("+14155551234", "hello")
        finally:
            await sender.close()

        assert seen["form"]["MessagingServiceSid"] == ["MG123"]
        assert "From" not in seen["form"]

    @pytest.mark.asyncio
    async def test_api_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})

        sender = _twilio(handler)
        await sender.initialize()
        try:
            result = await sender.send_sms("+14155551234", "hello")
        finally:
            await sender.close()

        assert result.success is False
        assert result.status == MessageStatus.FAILED
        assert result.error_code == "21211"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        sender = _twilio(handler)
        await sender.initialize()
        try:
            result = await sender.send_sms("+14155551234", "hello")
        finally:
            await sender.close()

        assert result.success is False
        assert "connection refused" in result.error_message

    @pytest.mark.asyncio
    async def test_requires_initialize(self):
        sender = _twilio(lambda request: httpx.Response(201, json={}))

        with pytest.raises(RuntimeError):
            await sender.send_sms("+14155551234", "hello")

    @pytest.mark.asyncio
    async def test_health_check(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/2010-04-01/Accounts/AC123.json"
            return httpx.Response(200, json={"sid": "AC123", "status": "active"})

        sender = _twilio(handler)
        assert await sender.health_check() is False

        await sender.initialize()
        try:
            assert await sender.health_check() is True
        finally:
            await sender.close()

    @pytest.mark.asyncio
    async def test_health_check_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        sender = _twilio(handler)
        await sender.initialize()
        try:
            assert await sender.health_check() is False
        finally:
            await sender.close()

    def test_requires_sender_identity(self):
        with pytest.raises(ValueError):
            TwilioSender(account_sid="AC123", auth_token="token")


class TestLogSender:
    """Tests for the non-production side channel."""

    def test_refuses_production(self):
        with pytest.raises(ValueError):
            LogSender("production")
        with pytest.raises(ValueError):
            LogSender("PRODUCTION")

    @pytest.mark.asyncio
    async def test_reports_success(self):
        sender = LogSender("development")

        result = await sender.send_sms("+14155551234", "Your verification code is 123456.")

        assert result.success is True
        assert result.status == MessageStatus.SENT
