from notification_client.main import create_app

app = create_app()
