"""TTS 路由

POST /api/tts: 返回一段静音 WAV（echo 模式不做真实合成）。
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field
from starlette.responses import Response

from ..services.echo import silent_wav

router = APIRouter()


class TTSRequest(BaseModel):
    """TTS 请求体"""

    text: str = Field(description="待合成文本")


@router.post("/api/tts")
async def tts(body: TTSRequest):
    """合成语音"""
    return Response(content=silent_wav(), media_type="audio/wav")
