from supabase import Client
from app.core.dependencies import is_group_member
from app.core.errors import to_http_exception
from app.modules.support import templates
from app.modules.support.schemas import (
    SupportComposeRequest, SmsComposePayload, SupportMessageResponse, TemplateResponse
)
from app.modules.users.service import UserService
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

FALLBACK_NAME = "friend"


class SupportService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)

    def list_templates(self) -> List[TemplateResponse]:
        return [
            TemplateResponse(
                key=key,
                text=text,
                keywords=sorted(w for w, k in templates.KEYWORDS.items() if k == key)
            )
            for key, text in templates.TEMPLATES.items()
            if key != "invite"
        ]

    def _get_feeling(self, group_id: str, recipient_id: str, feeling_id: Optional[str]) -> Optional[dict]:
        query = self.supabase.table("feelings")\
            .select("id, color, word, created_at")\
            .eq("group_id", group_id)\
            .eq("user_id", recipient_id)
        if feeling_id:
            query = query.eq("id", feeling_id)
        result = query.order("created_at", desc=True).limit(1).execute()
        if feeling_id and not result.data:
            raise HTTPException(status_code=404, detail="Feeling not found")
        return result.data[0] if result.data else None

    def compose_support(self, request: SupportComposeRequest, sender_id: str) -> SmsComposePayload:
        """Prepare a supportive SMS for a group-mate; the device sends it."""
        try:
            if request.recipient_id == sender_id:
                raise HTTPException(status_code=400, detail="Cannot send a support message to yourself")
            if not is_group_member(request.group_id, request.recipient_id, self.supabase):
                raise HTTPException(status_code=404, detail="Recipient is not a member of this group")

            profiles = self.users.get_profiles([sender_id, request.recipient_id])
            recipient = profiles.get(request.recipient_id)
            if not recipient or not recipient.phone:
                raise HTTPException(status_code=400, detail="Recipient has no phone number")
            sender = profiles.get(sender_id)

            feeling = self._get_feeling(request.group_id, request.recipient_id, request.feeling_id)
            word = feeling["word"] if feeling else None
            color = feeling["color"] if feeling else None

            if request.template_key:
                if request.template_key not in templates.TEMPLATES or request.template_key == "invite":
                    raise HTTPException(status_code=400, detail="Unknown template")
                key, text = request.template_key, templates.TEMPLATES[request.template_key]
            else:
                key, text = templates.select_template(word, color)

            body = templates.render_message(
                text,
                name=recipient.display_name or FALLBACK_NAME,
                sender=(sender.display_name if sender else None) or "",
                word=word or "some kind of way"
            )

            self.supabase.table("support_messages").insert({
                "sender_id": sender_id,
                "recipient_id": request.recipient_id,
                "group_id": request.group_id,
                "feeling_id": feeling["id"] if feeling else None,
                "template_key": key,
                "body": body
            }).execute()
            logger.info(f"Support message composed by {sender_id} for {request.recipient_id} ({key})")

            return SmsComposePayload(
                recipient_phone=recipient.phone,
                body=body,
                sms_uri=templates.build_sms_uri(recipient.phone, body),
                template_key=key
            )
        except Exception as e:
            raise to_http_exception(e)

    def list_sent(self, sender_id: str, limit: int = 20) -> List[SupportMessageResponse]:
        try:
            result = self.supabase.table("support_messages")\
                .select("*")\
                .eq("sender_id", sender_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
            return [SupportMessageResponse(**row) for row in result.data or []]
        except Exception as e:
            raise to_http_exception(e)
