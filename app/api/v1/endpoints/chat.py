"""
챗봇 스트리밍 API 엔드포인트
"""
import logging
import json
from typing import AsyncGenerator
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import StreamingResponse

from app.config import settings
from app.core.exceptions import ValidationError
from app.core.middleware.rate_limit import limiter
from app.models.chat import ChatCompletionRequest
from app.services.chat_service import ChatService, STREAM_ERROR_MESSAGE, get_chat_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
@limiter.limit(settings.chat_rate_limit)  # LLM 비용 고려
async def chat_stream(
    request: Request,
    chat_request: ChatCompletionRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    지식 기반 챗봇 대화 (SSE 스트리밍)

    **SSE 이벤트 형식:**
    - `data: {"type":"content","data":"텍스트 청크"}\\n\\n`
    - `data: {"type":"error","code":"...","message":"..."}\\n\\n`
    - `data: [DONE]\\n\\n`

    **처리 플로우:**
    1. 첨부 파일 내용 추출 (동시 실행)
    2. 마지막 user 메시지 기준 지식 컨텍스트 선택 (useKnowledge)
    3. 페르소나/언어/컨텍스트/파일 내용으로 시스템 프롬프트 조립
    4. LLM 스트리밍 API 호출 후 조각 단위 전송

    스트리밍 시작 전 실패는 500 `{"error": ...}`, 시작 후 실패는 error 이벤트로 전달됩니다.
    """
    if not chat_request.messages:
        raise ValidationError("Messages are required")

    logger.info(
        f"[ChatStream] 요청: messages={len(chat_request.messages)}, "
        f"model={chat_request.model}, persona={chat_request.personaId}, "
        f"knowledge={chat_request.useKnowledge}, attachments={len(chat_request.attachments)}"
    )

    # DB 작업은 스트리밍 시작 전에 모두 끝냄 (세션 수명 = 요청 의존성)
    try:
        messages = await chat_service.prepare_messages(chat_request)
    except Exception as e:
        logger.error(f"[ChatStream] 프롬프트 준비 실패: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=STREAM_ERROR_MESSAGE
        )

    async def event_generator() -> AsyncGenerator[str, None]:
        """SSE 이벤트 스트림 생성기"""
        error_sent = False

        async for event_json in chat_service.stream_events(messages, model=chat_request.model):
            # SSE 형식: "data: {json}\n\n"
            yield f"data: {event_json}\n\n"

            if json.loads(event_json).get("type") == "error":
                error_sent = True
                break

        if not error_sent:
            yield "data: [DONE]\n\n"
            logger.info("[ChatStream] 스트리밍 완료")

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"  # Nginx 버퍼링 비활성화
        }
    )
