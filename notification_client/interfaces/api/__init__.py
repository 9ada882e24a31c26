"""FastAPI relay between the notification client and local UI observers."""
