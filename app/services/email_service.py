"""
AWS SES Email Service for application status and message notifications.
"""

import logging
from html import escape
from typing import Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from app.core.config import settings
from app.models.application import ApplicationStatus

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    ApplicationStatus.SENT: "Your application has been sent.",
    ApplicationStatus.INTERVIEW: "Good news: the recruiter would like to meet you for an interview.",
    ApplicationStatus.ACCEPTED: "Congratulations, your application has been accepted!",
    ApplicationStatus.REFUSED: "Unfortunately your application was not retained this time.",
}


class EmailService:
    """
    Service for sending emails via AWS SES.

    Supports both development (sandbox) and production modes.
    """

    def __init__(self):
        session_kwargs = {
            'region_name': settings.AWS_REGION,
        }

        # Explicit credentials if provided (otherwise uses IAM role)
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            session_kwargs['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
            session_kwargs['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY

        self.ses_client = boto3.client('ses', **session_kwargs)

    def send_status_change_email(
        self,
        to_email: str,
        title: str,
        company: str,
        new_status: ApplicationStatus,
        user_name: Optional[str] = None
    ) -> bool:
        """
        Tell a candidate their application moved to a new status.

        Args:
            to_email: Recipient email address
            title: Job title of the application
            company: Company of the application
            new_status: Status after the change
            user_name: Optional name for the greeting

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        subject = f"{title} at {company}: {new_status.label}"
        html_body = self._build_status_html(title, company, new_status, user_name)
        text_body = self._build_status_text(title, company, new_status, user_name)

        try:
            response = self.ses_client.send_email(
                Source=f"{settings.AWS_SES_FROM_NAME} <{settings.AWS_SES_FROM_EMAIL}>",
                Destination={'ToAddresses': [to_email]},
                Message={
                    'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                    'Body': {
                        'Html': {'Data': html_body, 'Charset': 'UTF-8'},
                        'Text': {'Data': text_body, 'Charset': 'UTF-8'}
                    }
                }
            )

            message_id = response.get('MessageId')
            logger.info(f"Status change email sent to {to_email} (MessageId: {message_id})")
            return True

        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"AWS SES ClientError: {error_code} - {error_message}")

            if error_code == 'MailFromDomainNotVerified':
                logger.error("Sender email not verified in SES")

            return False

        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError: {str(e)}")
            return False

    def send_new_message_email(
        self,
        to_email: str,
        sender_name: str,
        preview: str,
        title: str,
        company: str,
        user_name: Optional[str] = None
    ) -> bool:
        """
        Tell a user they received a message on an application.

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        greeting = f"Hi {user_name}," if user_name else "Hi there,"
        subject = f"New message from {sender_name}"
        text_body = f"""{greeting}

{sender_name} sent you a message about {title} at {company}:

{preview}
"""
        html_body = f"""
<!DOCTYPE html>
<html>
<body style="margin: 0; padding: 24px; font-family: Arial, sans-serif; background-color: #f4f4f4;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 32px;">
        <p style="color: #666666; font-size: 16px;">{escape(greeting)}</p>
        <p style="color: #666666; font-size: 16px;">
            <strong>{escape(sender_name)}</strong> sent you a message about
            <strong>{escape(title)}</strong> at <strong>{escape(company)}</strong>:
        </p>
        <blockquote style="color: #333333; font-size: 16px; border-left: 4px solid #2563EB; padding-left: 12px;">{escape(preview)}</blockquote>
    </div>
</body>
</html>
"""

        try:
            response = self.ses_client.send_email(
                Source=f"{settings.AWS_SES_FROM_NAME} <{settings.AWS_SES_FROM_EMAIL}>",
                Destination={'ToAddresses': [to_email]},
                Message={
                    'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                    'Body': {
                        'Html': {'Data': html_body, 'Charset': 'UTF-8'},
                        'Text': {'Data': text_body, 'Charset': 'UTF-8'}
                    }
                }
            )
            logger.info(f"New message email sent to {to_email} (MessageId: {response.get('MessageId')})")
            return True

        except ClientError as e:
            logger.error(f"AWS SES ClientError: {e.response['Error']['Code']} - {e.response['Error']['Message']}")
            return False

        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError: {str(e)}")
            return False

    def _build_status_html(
        self,
        title: str,
        company: str,
        new_status: ApplicationStatus,
        user_name: Optional[str] = None
    ) -> str:
        greeting = f"Hi {escape(user_name)}," if user_name else "Hi there,"
        message = STATUS_MESSAGES.get(new_status, "")

        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Application update</title>
</head>
<body style="margin: 0; padding: 24px; font-family: Arial, sans-serif; background-color: #f4f4f4;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 32px;">
        <p style="color: #666666; font-size: 16px;">{greeting}</p>
        <p style="color: #666666; font-size: 16px;">
            Your application for <strong>{escape(title)}</strong> at <strong>{escape(company)}</strong>
            is now: <strong style="color: #2563EB;">{escape(new_status.label)}</strong>
        </p>
        <p style="color: #666666; font-size: 16px;">{escape(message)}</p>
    </div>
</body>
</html>
"""

    def _build_status_text(
        self,
        title: str,
        company: str,
        new_status: ApplicationStatus,
        user_name: Optional[str] = None
    ) -> str:
        greeting = f"Hi {user_name}," if user_name else "Hi there,"
        message = STATUS_MESSAGES.get(new_status, "")

        return f"""{greeting}

Your application for {title} at {company} is now: {new_status.label}

{message}
"""


email_service = EmailService()
