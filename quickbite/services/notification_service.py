# Notification service for email delivery
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from quickbite.core.config import settings

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, config=settings):
        # Email configuration
        self.smtp_server = config.SMTP_SERVER
        self.smtp_port = config.SMTP_PORT
        self.smtp_username = config.SMTP_USERNAME
        self.smtp_password = config.SMTP_PASSWORD
        self.from_email = config.FROM_EMAIL
        self.otp_expire_minutes = config.OTP_EXPIRE_MINUTES

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_username and self.smtp_password)

    def send_email(self, to_email: str, subject: str, html_body: str, text_body: Optional[str] = None) -> bool:
        """Send email notification; returns False instead of raising on failure"""
        try:
            if not self.is_configured:
                logger.warning("SMTP credentials not configured, skipping email")
                return False

            msg = MIMEMultipart("alternative")
            msg['From'] = self.from_email
            msg['To'] = to_email
            msg['Subject'] = subject

            if text_body:
                msg.attach(MIMEText(text_body, 'plain'))
            msg.attach(MIMEText(html_body, 'html'))

            with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=10) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.sendmail(self.from_email, to_email, msg.as_string())

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def send_otp_email(self, email: str, otp_code: str, username: str) -> dict:
        """Send the signup verification code.

        Delivery problems never block signup: whenever the email does not go
        out, the code is written to the log so the flow can still complete.
        """
        subject = "QuickBite - Verify Your Email Address"
        html_body = f"""
        <html>
        <body>
            <h2>Hi {username}!</h2>
            <p>Welcome to QuickBite! Use the verification code below to complete your account setup.</p>
            <div style="background-color: #ff6b35; color: white; font-size: 32px; font-weight: bold; padding: 20px; letter-spacing: 8px;">
                {otp_code}
            </div>
            <p>This code will expire in {self.otp_expire_minutes} minutes.</p>
            <p>If you didn't create an account with QuickBite, please ignore this email.</p>
        </body>
        </html>
        """
        text_body = (
            f"Hi {username}! Your QuickBite verification code is: {otp_code}. "
            f"This code expires in {self.otp_expire_minutes} minutes."
        )

        if self.send_email(email, subject, html_body, text_body):
            return {
                "sent": True,
                "method": "email",
                "message": "OTP sent to your email successfully! Please check your inbox.",
            }

        logger.info(f"OTP for {email}: {otp_code}")
        return {
            "sent": False,
            "method": "console",
            "message": "Email service unavailable. Your verification code has been logged.",
        }

    def send_welcome_email(self, email: str, username: str) -> bool:
        subject = "Welcome to QuickBite - Let's Get Started!"
        html_body = f"""
        <html>
        <body>
            <h2>Welcome to QuickBite, {username}!</h2>
            <p>Your account is ready. Start exploring restaurants and order your favorite food.</p>
            <p>Best regards,<br>QuickBite Team</p>
        </body>
        </html>
        """
        text_body = f"Welcome to QuickBite, {username}! Your account is ready."
        return self.send_email(email, subject, html_body, text_body)

    def send_order_confirmation(self, user_email: str, order_details: dict) -> bool:
        """Send order confirmation notification"""
        order_number = order_details.get('order_number')
        restaurant_name = order_details.get('restaurant_name', 'QuickBite')
        total = order_details.get('total', 0)

        email_subject = f"Order Placed - #{order_number}"
        email_body = f"""
        <html>
        <body>
            <h2>Order Confirmation</h2>
            <p>Dear Customer,</p>
            <p>Your order has been placed!</p>
            <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0;">
                <h3>Order Details:</h3>
                <p><strong>Order Number:</strong> #{order_number}</p>
                <p><strong>Restaurant:</strong> {restaurant_name}</p>
                <p><strong>Total Amount:</strong> {total:.2f}</p>
                <p><strong>Status:</strong> Pending</p>
            </div>
            <p>You will receive updates as your order progresses.</p>
            <p>Thank you for choosing QuickBite!</p>
        </body>
        </html>
        """
        return self.send_email(user_email, email_subject, email_body)


notification_service = NotificationService()
