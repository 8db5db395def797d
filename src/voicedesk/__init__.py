"""VoiceDesk -- 语音助理会话控制器

通话生命周期、语音识别、TTS 播放队列、定时 check-in 与任务提议审批。
"""

__version__ = "0.1.0"
