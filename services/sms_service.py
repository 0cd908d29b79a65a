import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)


class SMSError(Exception):
    """SMS 게이트웨이 연동 관련 예외"""
    pass


class SMSService:
    """Africa's Talking 문자 발송 클라이언트 (REST API 직접 호출)"""

    MESSAGING_PATH = "/version1/messaging"

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = settings.AT_BASE_URL.rstrip("/")
        self.username = settings.AT_USERNAME
        self.sender = settings.AT_SHORTCODE
        self.timeout = settings.SMS_TIMEOUT
        self.headers = {
            "apiKey": settings.AT_API_KEY,
            "Accept": "application/json",
        }
        # 테스트에서 httpx.MockTransport 주입
        self.transport = transport

    def _post(self, recipients: Sequence[str], message: str) -> Dict[str, Any]:
        """공통 발송 요청 처리"""
        data = {
            "username": self.username,
            "to": ",".join(recipients),
            "message": message,
        }
        if self.sender:
            data["from"] = self.sender

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(f"{self.base_url}{self.MESSAGING_PATH}", data=data, headers=self.headers)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException:
            raise SMSError("SMS gateway timed out")
        except httpx.HTTPStatusError as e:
            raise SMSError(f"SMS gateway error (HTTP {e.response.status_code}): {e.response.text}")
        except (httpx.HTTPError, ValueError) as e:
            raise SMSError(f"SMS gateway request failed: {e}")

        return payload.get("SMSMessageData", {})

    @staticmethod
    def _recipient_status(recipient: Dict[str, Any]) -> str:
        return "sent" if recipient.get("status") == "Success" else "failed"

    def send(self, to: str, message: str) -> Dict[str, Any]:
        """단건 발송. 게이트웨이가 수신 거부하면 SMSError"""
        data = self._post([to], message)
        recipients = data.get("Recipients") or []
        if not recipients or self._recipient_status(recipients[0]) != "sent":
            status = recipients[0].get("status") if recipients else data.get("Message", "no recipients")
            logger.warning("SMS rejected: to=%s status=%s", to, status)
            raise SMSError(f"SMS rejected for {to}: {status}")

        logger.info("SMS sent: to=%s message_id=%s", to, recipients[0].get("messageId"))
        return {
            "phone": to,
            "sid": recipients[0].get("messageId"),
            "status": "sent",
            "cost": recipients[0].get("cost"),
        }

    def send_bulk(self, numbers: Sequence[str], message: str) -> List[Dict[str, Any]]:
        """같은 문구 일괄 발송. 수신자별 성공/실패 목록 반환"""
        data = self._post(numbers, message)
        results = [
            {
                "phone": r.get("number"),
                "sid": r.get("messageId"),
                "status": self._recipient_status(r),
                "detail": r.get("status"),
            }
            for r in data.get("Recipients") or []
        ]
        logger.info(
            "Bulk SMS: requested=%d sent=%d",
            len(numbers), sum(1 for r in results if r["status"] == "sent"),
        )
        return results


sms_service = SMSService()
