from app_factory import AppConfig, create_app


config = AppConfig(
    title="Expenses API (Local)",
    description="In-memory expense list and create endpoint - Local Development",
    version="1.0.0",
    environment="local",
    root_message="Expenses API (Local Development)",
    log_context="Expenses API (Local Development)",
)
app = create_app(config)
