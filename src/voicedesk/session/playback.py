"""PlaybackQueue -- TTS 播放队列

按入队顺序逐条朗读，任意时刻至多一条在播放。
排空规则：队列非空且当前无播放 -> 开始播放队首。
单条合成或播放失败视同播放完成：弹出队首，继续下一条，队列不会停滞。
"""

import asyncio
import contextlib
from collections import deque

import structlog

from voicedesk.core.config import MESSAGE_PREVIEW_LENGTH
from voicedesk.core.models import Utterance
from voicedesk.provider.tts import SpeechSynthesizer

from .audio import AudioSink

log = structlog.get_logger()


class PlaybackQueue:
    """TTS 播放队列

    队列与 playing 标志只在事件循环线程上修改。
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer | None,
        sink: AudioSink | None,
    ) -> None:
        """
        Args:
            synthesizer: TTS 客户端
            sink: 已协商的音频输出，None 表示没有音频能力（入队文本直接丢弃）
        """
        self._synthesizer = synthesizer
        self._sink = sink
        self._queue: deque[Utterance] = deque()
        self._playing = False
        self._task: asyncio.Task | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._played = 0
        self._failed = 0

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def pending(self) -> tuple[str, ...]:
        """队列中的文本（含正在播放的队首）"""
        return tuple(u.text for u in self._queue)

    @property
    def played(self) -> int:
        """已处理条数（成功 + 失败）"""
        return self._played

    @property
    def failed(self) -> int:
        return self._failed

    def enqueue(self, text: str, audio: bytes | None = None) -> None:
        """追加到队尾，不阻塞、不失败"""
        self._queue.append(Utterance(text=text, audio=audio))
        self._idle.clear()
        self._drain()

    async def wait_idle(self) -> None:
        """等待队列清空且无播放"""
        await self._idle.wait()

    async def close(self) -> None:
        """取消正在进行的播放并清空队列"""
        self._queue.clear()
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._playing = False
        self._task = None
        self._idle.set()

    async def play_one(self, utterance: Utterance) -> None:
        """合成（如需要）并播放一条，播放结束后返回

        Raises:
            Exception: 合成或播放失败，由调用方视同完成处理
        """
        if self._sink is None:
            log.debug("playback_skipped_no_audio_output")
            return

        audio = utterance.audio
        if audio is None:
            if self._synthesizer is None:
                log.debug("playback_skipped_no_synthesizer")
                return
            audio = await self._synthesizer.synthesize(utterance.text)

        await self._sink.play(audio)

    def _drain(self) -> None:
        if self._playing:
            return
        if not self._queue:
            self._idle.set()
            return

        self._playing = True
        head = self._queue[0]
        self._task = asyncio.create_task(self._run_head(head), name="voicedesk-playback")

    async def _run_head(self, head: Utterance) -> None:
        try:
            await self.play_one(head)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._failed += 1
            log.warning(
                "playback_failed",
                text_preview=head.text[:MESSAGE_PREVIEW_LENGTH],
                error=str(e),
                error_type=type(e).__name__,
            )
        finally:
            self._finish_head()

    def _finish_head(self) -> None:
        # 完成或失败都恰好弹出队首一条
        if self._queue:
            self._queue.popleft()
        self._played += 1
        self._playing = False
        self._task = None
        self._drain()
