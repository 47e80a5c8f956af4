from html import escape
from typing import Iterable, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.logger import setup_logger
from src.models import AdminNotificationModel


SEVERITY_MINOR = 'minor'
NOTICE_TITLE = 'Product missing dimensions'
NOTICE_HEADER = 'The following products do not have dimension set:'
NOTICE_FOOTER = (
    '<small>Disable these notifications in System > Settings > Carriers > Intelipost</small>'
)

logger = setup_logger('intelipost.notifier')


class NotificationInbox(Protocol):
    async def add(self, severity: str, title: str, message: str) -> None:
        ...


class DatabaseNotificationInbox:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, severity: str, title: str, message: str) -> None:
        self.session.add(
            AdminNotificationModel(severity=severity, title=title, message=message)
        )
        await self.session.commit()


class DimensionNotifier:
    def __init__(self, inbox: NotificationInbox, admin_base_url: str):
        self.inbox = inbox
        self.admin_base_url = admin_base_url.rstrip('/')

    def product_edit_url(self, product_id: int) -> str:
        return f'{self.admin_base_url}/catalog/product/edit/id/{product_id}'

    def build_message(self, lines: Iterable) -> str:
        message = NOTICE_HEADER
        message += '<ul>'
        for line in lines:
            message += '<li>'
            message += f'<a href="{self.product_edit_url(line.product_id)}">'
            message += escape(line.name or str(line.product_id))
            message += '</a>'
            message += '</li>'
        message += '</ul>'
        message += NOTICE_FOOTER
        return message

    async def notify(self, lines) -> None:
        lines = list(lines)
        if not lines:
            return

        try:
            await self.inbox.add(SEVERITY_MINOR, NOTICE_TITLE, self.build_message(lines))
            logger.info(f"Missing dimensions notice sent for {len(lines)} product(s)")
        except Exception as e:
            # The quote is already aborted; a lost notice must not change that
            logger.error(f"Failed to deliver missing dimensions notice: {str(e)}")
