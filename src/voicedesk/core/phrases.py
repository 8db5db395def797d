"""助理固定话术

会话控制器在各状态流转点追加的 assistant 消息文本。
"""

GREETING = (
    "Hello! I'm your AI assistant. You can click the microphone button to start "
    "talking. I can check in with you at any time. Just let me know when you're ready."
)
CALL_ENDED = "Call ended. Thank you for talking with me!"
SPEECH_UNSUPPORTED = "Sorry, voice recognition isn't supported on this device."
NO_SPEECH = "I didn't catch that. Could you please speak again?"
SPEECH_START_FAILED = "I couldn't start listening. Please try again."

AI_FALLBACK = "I'm having trouble processing your request."
SIGN_IN_REQUIRED = "You need to sign in again before I can help with that."

TASKS_HEADER = "Here are your tasks:"
NO_TASKS = "You have no tasks scheduled for the given time period."
PROPOSALS_READY = (
    "I've proposed some tasks based on your input. Please review and approve them."
)

CHECK_IN = "I'm checking in with you now! How are you doing with your tasks?"

TASKS_CONFIRMED = "Tasks have been added successfully!"
TASKS_CONFIRM_FAILED = "There was an error adding your tasks. Please try again."
TASKS_DISCARDED = (
    "Tasks have been discarded. Is there anything else you'd like me to help with?"
)


def format_task_list(titles: list[str]) -> str:
    """拼接任务列表消息：标题按行排列"""
    return TASKS_HEADER + "\n" + "\n".join(titles)
