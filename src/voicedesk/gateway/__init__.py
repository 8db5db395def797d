"""VoiceDesk Echo Gateway -- 本地开发与集成测试用后端"""
