"""ProposalGate -- 任务提议审批

AI 提议的任务在用户明确批准前不会持久化。
approve 整批提交（不支持部分批准）；discard 只在本地清空，不发网络请求。
"""

import structlog

from voicedesk.core import phrases
from voicedesk.core.models import MessageRole
from voicedesk.provider.auth import TokenProvider
from voicedesk.provider.confirm import TaskConfirmClient
from voicedesk.provider.exceptions import RemoteError, UnauthenticatedError

from .state import SessionState

log = structlog.get_logger()


class ProposalGate:
    """任务提议审批闸门"""

    def __init__(
        self,
        state: SessionState,
        confirm_client: TaskConfirmClient,
        tokens: TokenProvider,
    ) -> None:
        self._state = state
        self._confirm_client = confirm_client
        self._tokens = tokens
        self._approving = False

    @property
    def pending(self) -> bool:
        return bool(self._state.proposed_tasks)

    @property
    def approving(self) -> bool:
        return self._approving

    async def approve(self) -> bool:
        """批准整批待审批任务

        成功：批次未被新提议替换时清空，追加确认消息（后端提供 tts_audio 时直接用于朗读）。
        失败：批次保持待审批，追加错误消息，不重试。
        已有批准请求在途时再次调用为 no-op。

        Returns:
            True 表示已写入
        """
        if self._approving:
            log.debug("approve_skipped_in_flight")
            return False

        batch = list(self._state.proposed_tasks)
        revision = self._state.proposals_revision
        if not batch:
            log.debug("approve_skipped_empty_batch")
            return False

        self._approving = True
        try:
            token = await self._tokens.get_token()
            result = await self._confirm_client.confirm(batch, token)
        except UnauthenticatedError:
            log.warning("approve_unauthenticated", batch_size=len(batch))
            self._state.add_message(phrases.SIGN_IN_REQUIRED, MessageRole.ASSISTANT)
            return False
        except RemoteError as e:
            log.warning("approve_failed", batch_size=len(batch), error=str(e))
            self._state.add_message(phrases.TASKS_CONFIRM_FAILED, MessageRole.ASSISTANT)
            return False
        finally:
            self._approving = False

        # 请求在途期间到达的新提议保持待审批
        if self._state.proposals_revision == revision:
            self._state.set_proposed_tasks([])
        else:
            log.info("approve_kept_newer_batch", batch_size=len(batch))
        self._state.add_message(
            phrases.TASKS_CONFIRMED,
            MessageRole.ASSISTANT,
            audio=result.tts_audio,
        )
        log.info("proposals_approved", batch_size=len(batch))
        return True

    def discard(self) -> None:
        """丢弃整批待审批任务（无网络请求）"""
        batch_size = len(self._state.proposed_tasks)
        self._state.set_proposed_tasks([])
        self._state.add_message(phrases.TASKS_DISCARDED, MessageRole.ASSISTANT)
        log.info("proposals_discarded", batch_size=batch_size)
