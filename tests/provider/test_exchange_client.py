"""AIExchangeClient 单元测试

通过 httpx.MockTransport 模拟后端，验证 bearer token 注入、回复解析、
未登录不发请求、网络错误 / 非 2xx / 响应体格式错误统一抛出 RemoteError。
"""

import json

import httpx
import pytest
from voicedesk.core.models import Priority
from voicedesk.provider.exceptions import RemoteError, UnauthenticatedError
from voicedesk.provider.exchange import AIExchangeClient, AIReply


def _client_with(handler) -> AIExchangeClient:
    http_client = httpx.AsyncClient(
        base_url="http://backend.test",
        transport=httpx.MockTransport(handler),
    )
    return AIExchangeClient(http_client)


class TestAIExchangeClientSend:
    """send() 方法测试"""

    async def test_successful_reply(self):
        """成功调用返回完整 AIReply"""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(
                200,
                json={
                    "freeform_answer": "Okay!",
                    "tasks_fetched": [{"id": 1, "title": "Gym", "user_id": "u1"}],
                    "proposed_tasks": [
                        {"title": "Call mom", "priority": "high", "user_id": "u1"}
                    ],
                    "check_in_delay": 300000,
                },
            )

        client = _client_with(handler)
        reply = await client.send("hello", "tok-1")

        assert isinstance(reply, AIReply)
        assert reply.freeform_answer == "Okay!"
        assert [t.title for t in reply.tasks_fetched] == ["Gym"]
        assert reply.proposed_tasks[0].priority == Priority.HIGH
        assert reply.check_in_delay == 300000

        request = captured[0]
        assert request.url.path == "/api/ai-response"
        assert request.headers["Authorization"] == "Bearer tok-1"
        assert len(request.headers["X-Request-ID"]) == 26
        assert json.loads(request.content) == {"message": "hello"}

    async def test_optional_fields_absent(self):
        """只有 freeform_answer 时其余字段为 None"""
        client = _client_with(lambda r: httpx.Response(200, json={"freeform_answer": "hi"}))
        reply = await client.send("hello", "tok")
        assert reply.tasks_fetched is None
        assert reply.proposed_tasks is None
        assert reply.check_in_delay is None

    async def test_empty_tasks_fetched_kept_as_empty_list(self):
        client = _client_with(
            lambda r: httpx.Response(200, json={"freeform_answer": "hi", "tasks_fetched": []})
        )
        reply = await client.send("hello", "tok")
        assert reply.tasks_fetched == []

    @pytest.mark.parametrize("delay", ["300000", True, None, [1]])
    async def test_non_numeric_check_in_delay_ignored(self, delay):
        """非数值的 check_in_delay 视为未提供"""
        client = _client_with(
            lambda r: httpx.Response(200, json={"freeform_answer": "hi", "check_in_delay": delay})
        )
        reply = await client.send("hello", "tok")
        assert reply.check_in_delay is None

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token_raises_without_request(self, token):
        """没有 token 时抛出 UnauthenticatedError 且不发请求"""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"freeform_answer": "hi"})

        client = _client_with(handler)
        with pytest.raises(UnauthenticatedError):
            await client.send("hello", token)
        assert calls == []

    async def test_server_error_raises_remote_error(self):
        client = _client_with(lambda r: httpx.Response(500, json={"error": "boom"}))
        with pytest.raises(RemoteError) as exc_info:
            await client.send("hello", "tok")
        assert exc_info.value.status_code == 500
        assert exc_info.value.endpoint == "/api/ai-response"

    async def test_connection_error_raises_remote_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = _client_with(handler)
        with pytest.raises(RemoteError) as exc_info:
            await client.send("hello", "tok")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    async def test_non_json_body_raises_remote_error(self):
        client = _client_with(lambda r: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(RemoteError):
            await client.send("hello", "tok")

    async def test_missing_answer_raises_remote_error(self):
        client = _client_with(lambda r: httpx.Response(200, json={"tasks_fetched": []}))
        with pytest.raises(RemoteError):
            await client.send("hello", "tok")

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    async def test_non_finite_check_in_delay_raises_remote_error(self, literal):
        """json 模块接受 Infinity / NaN，这类回复按格式错误处理"""
        body = '{"freeform_answer": "ok", "check_in_delay": %s}' % literal
        client = _client_with(
            lambda r: httpx.Response(
                200, content=body.encode(), headers={"content-type": "application/json"}
            )
        )
        with pytest.raises(RemoteError) as exc_info:
            await client.send("hello", "tok")
        assert exc_info.value.endpoint == "/api/ai-response"
