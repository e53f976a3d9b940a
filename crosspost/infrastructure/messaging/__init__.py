from .whatsapp_session import WhatsAppSession

__all__ = ["WhatsAppSession"]
