"""WhatsApp notices to residents and the notification log."""
