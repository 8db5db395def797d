"""VoiceDesk Core -- 领域模型与配置常量"""
